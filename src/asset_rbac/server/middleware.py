"""Profile resolution middleware for the HTTP server."""

from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from asset_rbac.auth.repository import ProfileRepository
from asset_rbac.observability import RequestContext, Timer, emit_timer, get_logger

logger = get_logger(__name__)


class ProfileMiddleware(BaseHTTPMiddleware):
    """Resolves the signed-in profile for each request.

    The id of the signed-in user is set by the authentication proxy in
    front of this service. The profile is looked up fresh on every
    request and stored on ``request.state.profile``; a missing header or
    unknown id leaves it at None. Routes decide what an absent profile
    means, this middleware never rejects a request.
    """

    def __init__(
        self,
        app: Any,
        repository: ProfileRepository,
        header_name: str = "X-User-ID",
        public_paths: list[str] | None = None,
    ) -> None:
        """Initialize profile middleware.

        Args:
            app: The ASGI application
            repository: Profile store to resolve ids against
            header_name: Header carrying the signed-in user's id
            public_paths: Paths that skip profile resolution
        """
        super().__init__(app)
        self.repository = repository
        self.header_name = header_name
        self.public_paths = set(public_paths or ["/health", "/ping"])

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        request.state.profile = None

        if request.url.path in self.public_paths:
            return await call_next(request)

        user_id = request.headers.get(self.header_name)
        profile = None
        if user_id:
            async with Timer() as timer:
                profile = await self.repository.find_profile(user_id)
            emit_timer("profile.lookup", timer.duration_ms)
            if profile is None:
                logger.warning("Unknown profile id", context={"user_id": user_id})

        request.state.profile = profile

        async with RequestContext(
            request_id=request.headers.get("X-Request-ID"),
            user_id=profile.id if profile else None,
            role=profile.role_name if profile else None,
        ):
            return await call_next(request)
