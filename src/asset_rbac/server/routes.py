"""HTTP route handlers."""

import functools
import json
import time
from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from asset_rbac.auth.profile import UserProfile
from asset_rbac.auth.repository import ProfileRepository
from asset_rbac.exceptions import InvalidRoleError, ProfileExistsError, ProfileNotFoundError
from asset_rbac.observability import get_logger
from asset_rbac.rbac.guard import AccessGuard
from asset_rbac.rbac.permissions import Capability, derive_permissions
from asset_rbac.rbac.roles import Role
from asset_rbac.views.screens import Screen, compose_screen

logger = get_logger(__name__)

Handler = Callable[[Request], Awaitable[Response]]


def current_profile(request: Request) -> UserProfile | None:
    """The profile resolved by ProfileMiddleware, if any."""
    return getattr(request.state, "profile", None)


def require_capability(capability: Capability) -> Callable[[Handler], Handler]:
    """Decorator requiring a capability for a route handler.

    Checks authentication first (401), then authorization (403).
    """
    guard = AccessGuard.for_capability(capability)

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: Request) -> Response:
            profile = current_profile(request)
            if profile is None:
                return JSONResponse({"error": "Authentication required"}, status_code=401)

            if not guard.allows(profile):
                logger.info(
                    "Request denied",
                    context={"path": request.url.path, "capability": capability.value},
                )
                return JSONResponse(
                    {"error": f"Permission required: {capability.value}"},
                    status_code=403,
                )
            return await handler(request)

        return wrapper

    return decorator


async def _json_body(request: Request) -> dict | None:
    try:
        body = await request.json()
    except json.JSONDecodeError:
        return None
    return body if isinstance(body, dict) else None


def create_routes(repository: ProfileRepository) -> list[Route]:
    """Create HTTP routes.

    Args:
        repository: Profile store

    Returns:
        List of Starlette routes
    """

    async def health(request: Request) -> Response:
        """Health check endpoint."""
        return JSONResponse({"status": "ok", "timestamp": time.time()})

    async def roles(request: Request) -> Response:
        """List the known roles.

        GET /roles
        """
        return JSONResponse(
            {
                "roles": [
                    {"name": role.value, "description": role.description}
                    for role in Role.known()
                ]
            }
        )

    async def me(request: Request) -> Response:
        """Get the signed-in profile.

        GET /me
        """
        profile = current_profile(request)
        if profile is None:
            return JSONResponse({"error": "Authentication required"}, status_code=401)
        return JSONResponse(profile.to_dict())

    async def my_permissions(request: Request) -> Response:
        """Get the permissions of the signed-in profile.

        GET /me/permissions

        Without a profile every capability is false; this is not an error.
        """
        profile = current_profile(request)
        permissions = derive_permissions(profile.role if profile else None)
        role = permissions.role
        return JSONResponse(
            {
                "role": role.value if role.is_known else None,
                "permissions": permissions.to_dict(),
            }
        )

    async def screen_layout(request: Request) -> Response:
        """Get the controls a screen shows to the signed-in profile.

        GET /views/{screen}
        """
        name = request.path_params["screen"]
        try:
            screen = Screen(name)
        except ValueError:
            return JSONResponse({"error": f"Unknown screen: {name}"}, status_code=404)

        layout = compose_screen(screen, current_profile(request))
        return JSONResponse(layout.to_dict())

    @require_capability(Capability.MANAGE_USERS)
    async def admin_users_list(request: Request) -> Response:
        """List profiles.

        GET /admin/users?role=Gebruiker
        """
        role = request.query_params.get("role")
        try:
            profiles = await repository.list_profiles(role=role)
        except InvalidRoleError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        return JSONResponse(
            {
                "users": [p.to_dict() for p in profiles],
                "total": len(profiles),
            }
        )

    @require_capability(Capability.MANAGE_USERS)
    async def admin_user_create(request: Request) -> Response:
        """Create a profile.

        POST /admin/users
        Body: {"email": "...", "full_name": "...", "role": "Gebruiker"}
        """
        body = await _json_body(request)
        if body is None:
            return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

        email = body.get("email")
        if not email:
            return JSONResponse({"error": "Missing required field: email"}, status_code=400)
        if not isinstance(email, str):
            return JSONResponse({"error": "Field email must be a string"}, status_code=400)

        full_name = body.get("full_name")
        if full_name is not None and not isinstance(full_name, str):
            return JSONResponse({"error": "Field full_name must be a string"}, status_code=400)

        try:
            profile = await repository.create_profile(
                email=email,
                full_name=full_name,
                role=body.get("role", Role.GEBRUIKER.value),
            )
        except (InvalidRoleError, ValueError) as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except ProfileExistsError as e:
            return JSONResponse({"error": str(e)}, status_code=409)

        return JSONResponse(profile.to_dict(), status_code=201)

    @require_capability(Capability.MANAGE_USERS)
    async def admin_user_role_update(request: Request) -> Response:
        """Change the role of a profile.

        PUT /admin/users/{user_id}/role
        Body: {"role": "Facilitair Medewerker"}
        """
        user_id = request.path_params["user_id"]
        body = await _json_body(request)
        if body is None:
            return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

        role = body.get("role")
        if not role:
            return JSONResponse({"error": "Missing required field: role"}, status_code=400)

        try:
            profile = await repository.update_role(user_id, role)
        except InvalidRoleError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except ProfileNotFoundError as e:
            return JSONResponse({"error": str(e)}, status_code=404)

        return JSONResponse(profile.to_dict())

    @require_capability(Capability.MANAGE_USERS)
    async def admin_user_delete(request: Request) -> Response:
        """Delete a profile.

        DELETE /admin/users/{user_id}
        """
        user_id = request.path_params["user_id"]
        try:
            await repository.delete_profile(user_id)
        except ProfileNotFoundError as e:
            return JSONResponse({"error": str(e)}, status_code=404)

        return JSONResponse({"deleted": user_id})

    return [
        Route("/health", health, methods=["GET"]),
        Route("/ping", health, methods=["GET"]),
        Route("/roles", roles, methods=["GET"]),
        Route("/me", me, methods=["GET"]),
        Route("/me/permissions", my_permissions, methods=["GET"]),
        Route("/views/{screen}", screen_layout, methods=["GET"]),
        Route("/admin/users", admin_users_list, methods=["GET"]),
        Route("/admin/users", admin_user_create, methods=["POST"]),
        Route("/admin/users/{user_id}/role", admin_user_role_update, methods=["PUT"]),
        Route("/admin/users/{user_id}", admin_user_delete, methods=["DELETE"]),
    ]
