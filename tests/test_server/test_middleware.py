"""Tests for server middleware."""

import asyncio

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from asset_rbac.auth.repository import ProfileRepository
from asset_rbac.backends.database.sqlite import SQLiteDatabase
from asset_rbac.observability import (
    register_metric_callback,
    role_var,
    unregister_metric_callback,
    user_id_var,
)
from asset_rbac.server.middleware import ProfileMiddleware


@pytest.fixture
def repository():
    """Profile repository with one Facilitair Medewerker."""
    db = SQLiteDatabase(path=":memory:")
    repo = ProfileRepository(db)

    async def seed() -> None:
        await repo.initialize_schema()
        await repo.create_profile("fm@assetspek.nl", role="Facilitair Medewerker")

    asyncio.run(seed())
    yield repo
    asyncio.run(db.close())


@pytest.fixture
def profile_id(repository) -> str:
    profiles = asyncio.run(repository.list_profiles())
    return profiles[0].id


def build_app(repository: ProfileRepository, **kwargs) -> Starlette:
    async def handler(request: Request) -> JSONResponse:
        """Echo the resolved profile and logging context."""
        profile = request.state.profile
        return JSONResponse({
            "profile_id": profile.id if profile else None,
            "log_user_id": user_id_var.get(),
            "log_role": role_var.get(),
        })

    app = Starlette(routes=[Route("/test", handler), Route("/health", handler)])
    app.add_middleware(ProfileMiddleware, repository=repository, **kwargs)
    return app


class TestProfileMiddleware:
    """Tests for ProfileMiddleware."""

    def test_resolves_profile_from_header(self, repository, profile_id) -> None:
        """The header id is resolved to a profile."""
        client = TestClient(build_app(repository))

        response = client.get("/test", headers={"X-User-ID": profile_id})

        assert response.status_code == 200
        assert response.json()["profile_id"] == profile_id

    def test_binds_logging_context(self, repository, profile_id) -> None:
        """The profile id and role are available to loggers during the request."""
        client = TestClient(build_app(repository))

        data = client.get("/test", headers={"X-User-ID": profile_id}).json()

        assert data["log_user_id"] == profile_id
        assert data["log_role"] == "Facilitair Medewerker"

    def test_missing_header_leaves_profile_absent(self, repository) -> None:
        """No header, no profile, request still served."""
        client = TestClient(build_app(repository))

        response = client.get("/test")

        assert response.status_code == 200
        assert response.json()["profile_id"] is None

    def test_unknown_id_leaves_profile_absent(self, repository) -> None:
        """Unknown ids are treated as absent."""
        client = TestClient(build_app(repository))

        response = client.get("/test", headers={"X-User-ID": "user-missing"})

        assert response.status_code == 200
        assert response.json()["profile_id"] is None

    def test_public_paths_skip_lookup(self, repository, profile_id) -> None:
        """Public paths are not resolved."""
        client = TestClient(build_app(repository))

        response = client.get("/health", headers={"X-User-ID": profile_id})

        assert response.json()["profile_id"] is None

    def test_custom_header_name(self, repository, profile_id) -> None:
        """Header name can be configured."""
        client = TestClient(build_app(repository, header_name="X-Auth-User"))

        response = client.get("/test", headers={"X-Auth-User": profile_id})

        assert response.json()["profile_id"] == profile_id

    def test_lookup_is_timed(self, repository, profile_id) -> None:
        """Each lookup emits a profile.lookup timer."""
        received: list[str] = []

        def callback(name: str, value: float, labels: dict) -> None:
            received.append(name)

        register_metric_callback(callback)
        try:
            TestClient(build_app(repository)).get("/test", headers={"X-User-ID": profile_id})
        finally:
            unregister_metric_callback(callback)

        assert "profile.lookup" in received
