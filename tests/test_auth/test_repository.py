"""Tests for the profile repository."""

import pytest

from asset_rbac.auth.repository import ProfileRepository
from asset_rbac.backends.database.sqlite import SQLiteDatabase
from asset_rbac.exceptions import InvalidRoleError, ProfileExistsError, ProfileNotFoundError
from asset_rbac.rbac.permissions import derive_permissions
from asset_rbac.rbac.roles import Role


@pytest.fixture
async def db():
    """Create an in-memory SQLite database."""
    database = SQLiteDatabase(path=":memory:")
    yield database
    await database.close()


@pytest.fixture
async def repository(db):
    """Create a profile repository with initialized schema."""
    repo = ProfileRepository(db)
    await repo.initialize_schema()
    return repo


class TestProfileRepository:
    """Tests for ProfileRepository."""

    @pytest.mark.asyncio
    async def test_create_profile_defaults_to_gebruiker(self, repository) -> None:
        """New profiles get the default role."""
        profile = await repository.create_profile("Jan@Assetspek.nl", "Jan")

        assert profile.role is Role.GEBRUIKER
        assert profile.email == "jan@assetspek.nl"
        assert profile.full_name == "Jan"

    @pytest.mark.asyncio
    async def test_create_profile_with_role(self, repository) -> None:
        """An explicit known role is stored."""
        profile = await repository.create_profile("a@assetspek.nl", role="ICT Admin")

        stored = await repository.get_profile(profile.id)
        assert stored.role is Role.ICT_ADMIN

    @pytest.mark.asyncio
    async def test_create_profile_rejects_unknown_role(self, repository) -> None:
        """Unknown roles cannot be written."""
        with pytest.raises(InvalidRoleError):
            await repository.create_profile("a@assetspek.nl", role="Super Admin")

    @pytest.mark.asyncio
    async def test_create_duplicate_email(self, repository) -> None:
        """E-mail addresses are unique."""
        await repository.create_profile("a@assetspek.nl")

        with pytest.raises(ProfileExistsError):
            await repository.create_profile("A@assetspek.nl")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["not-an-email", "", "   ", "a@b", "a b@assetspek.nl"])
    async def test_create_profile_rejects_invalid_email(self, repository, email) -> None:
        """Malformed e-mail addresses are rejected and nothing is stored."""
        with pytest.raises(ValueError):
            await repository.create_profile(email)

        assert await repository.list_profiles() == []

    @pytest.mark.asyncio
    async def test_create_profile_rejects_long_email(self, repository) -> None:
        """Addresses longer than 254 characters are rejected."""
        with pytest.raises(ValueError, match="maximum length"):
            await repository.create_profile(f"{'a' * 250}@assetspek.nl")

    @pytest.mark.asyncio
    async def test_get_nonexistent_profile(self, repository) -> None:
        """Missing profiles raise ProfileNotFoundError."""
        with pytest.raises(ProfileNotFoundError):
            await repository.get_profile("user-missing")

    @pytest.mark.asyncio
    async def test_find_nonexistent_profile(self, repository) -> None:
        """find_profile returns None for missing profiles."""
        assert await repository.find_profile("user-missing") is None

    @pytest.mark.asyncio
    async def test_list_profiles_by_role(self, repository) -> None:
        """list_profiles filters on role."""
        await repository.create_profile("a@assetspek.nl", role=Role.ICT_ADMIN)
        await repository.create_profile("b@assetspek.nl")
        await repository.create_profile("c@assetspek.nl")

        everyone = await repository.list_profiles()
        users = await repository.list_profiles(role=Role.GEBRUIKER)

        assert [p.email for p in everyone] == ["a@assetspek.nl", "b@assetspek.nl", "c@assetspek.nl"]
        assert [p.email for p in users] == ["b@assetspek.nl", "c@assetspek.nl"]

    @pytest.mark.asyncio
    async def test_list_profiles_rejects_unknown_role_filter(self, repository) -> None:
        """Filtering on an unknown role is an error."""
        with pytest.raises(InvalidRoleError):
            await repository.list_profiles(role="bogus")

    @pytest.mark.asyncio
    async def test_update_role(self, repository) -> None:
        """Role changes are persisted and change derived permissions."""
        profile = await repository.create_profile("a@assetspek.nl")
        assert not derive_permissions(profile.role).can_view_audit_logs

        updated = await repository.update_role(profile.id, "ICT Admin")
        stored = await repository.get_profile(profile.id)

        assert updated.role is Role.ICT_ADMIN
        assert stored.role is Role.ICT_ADMIN
        assert derive_permissions(stored.role).can_view_audit_logs

    @pytest.mark.asyncio
    async def test_update_role_rejects_unknown(self, repository) -> None:
        """UNKNOWN is not assignable."""
        profile = await repository.create_profile("a@assetspek.nl")

        with pytest.raises(InvalidRoleError):
            await repository.update_role(profile.id, Role.UNKNOWN)

    @pytest.mark.asyncio
    async def test_update_role_missing_profile(self, repository) -> None:
        """Updating a missing profile raises ProfileNotFoundError."""
        with pytest.raises(ProfileNotFoundError):
            await repository.update_role("user-missing", Role.GEBRUIKER)

    @pytest.mark.asyncio
    async def test_update_role_profile_deleted_during_update(self) -> None:
        """A profile removed while its role is being changed is reported missing."""

        class DeletingDatabase(SQLiteDatabase):
            async def execute(self, query, params=None):
                if query.lstrip().startswith("UPDATE profiles"):
                    await super().execute(
                        "DELETE FROM profiles WHERE id = :id", {"id": params["id"]}
                    )
                return await super().execute(query, params)

        database = DeletingDatabase(path=":memory:")
        repo = ProfileRepository(database)
        await repo.initialize_schema()
        profile = await repo.create_profile("a@assetspek.nl")

        with pytest.raises(ProfileNotFoundError):
            await repo.update_role(profile.id, Role.ICT_ADMIN)

        await database.close()

    @pytest.mark.asyncio
    async def test_update_role_returns_stored_profile(self, repository) -> None:
        """The returned profile is the row as stored after the update."""
        profile = await repository.create_profile("a@assetspek.nl", "Anna")

        updated = await repository.update_role(profile.id, Role.FACILITAIR_ADMIN)

        assert updated == await repository.get_profile(profile.id)
        assert updated.full_name == "Anna"

    @pytest.mark.asyncio
    async def test_delete_profile(self, repository) -> None:
        """Deleted profiles are gone."""
        profile = await repository.create_profile("a@assetspek.nl")

        await repository.delete_profile(profile.id)

        assert await repository.find_profile(profile.id) is None
        with pytest.raises(ProfileNotFoundError):
            await repository.delete_profile(profile.id)

    @pytest.mark.asyncio
    async def test_legacy_role_is_readable_and_fails_closed(self, repository, db) -> None:
        """A stored role this version does not know reads back as UNKNOWN."""
        await db.execute(
            """
            INSERT INTO profiles (id, email, full_name, role, created_at, updated_at)
            VALUES (:id, :email, :full_name, :role, :created_at, :updated_at)
            """,
            {
                "id": "user-legacy",
                "email": "legacy@assetspek.nl",
                "full_name": None,
                "role": "Beheerder",
                "created_at": "2024-01-01T00:00:00+00:00",
                "updated_at": "2024-01-01T00:00:00+00:00",
            },
        )

        profile = await repository.get_profile("user-legacy")

        assert profile.role_name == "Beheerder"
        assert profile.role is Role.UNKNOWN
        assert derive_permissions(profile.role).granted() == frozenset()
