"""Profile persistence."""

import uuid
from datetime import datetime, timezone
from pathlib import Path

from asset_rbac.auth.profile import UserProfile
from asset_rbac.exceptions import InvalidRoleError, ProfileExistsError, ProfileNotFoundError
from asset_rbac.observability import get_logger
from asset_rbac.protocols import Database, Row
from asset_rbac.rbac.roles import DEFAULT_ROLE, Role
from asset_rbac.utils.validation import validate_email

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_profile(row: Row) -> UserProfile:
    return UserProfile(
        id=row.id,
        email=row.email,
        full_name=row.full_name,
        role_name=row.role,
    )


def _require_known(role: Role | str) -> Role:
    parsed = Role.parse(role)
    if not parsed.is_known:
        raise InvalidRoleError(f"Unknown role: {role!r}")
    return parsed


class ProfileRepository:
    """Reads and writes user profiles.

    Stored role strings are returned as-is, so a row with a role this
    version does not know is still readable; derivation fails it closed.
    Writes only accept known roles.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    async def initialize_schema(self) -> None:
        """Create the profiles table if it does not exist."""
        schema = (Path(__file__).parent / "schema.sql").read_text()
        for statement in schema.split(";"):
            statement = statement.strip()
            if statement:
                await self.database.execute(statement)

    async def create_profile(
        self,
        email: str,
        full_name: str | None = None,
        role: Role | str = DEFAULT_ROLE,
    ) -> UserProfile:
        """Create a profile.

        Args:
            email: E-mail address (unique)
            full_name: Optional display name
            role: Initial role, defaults to Gebruiker

        Raises:
            InvalidRoleError: If the role is not a known role
            ProfileExistsError: If the e-mail address is already taken
            ValueError: If the e-mail address is malformed
        """
        parsed = _require_known(role)
        email = validate_email(email)

        existing = await self.database.execute(
            "SELECT id FROM profiles WHERE email = :email",
            {"email": email},
        )
        if existing:
            raise ProfileExistsError(f"Profile already exists: {email}")

        profile_id = f"user-{uuid.uuid4().hex[:12]}"
        now = _now()

        await self.database.execute(
            """
            INSERT INTO profiles (id, email, full_name, role, created_at, updated_at)
            VALUES (:id, :email, :full_name, :role, :created_at, :updated_at)
            """,
            {
                "id": profile_id,
                "email": email,
                "full_name": full_name,
                "role": parsed.value,
                "created_at": now,
                "updated_at": now,
            },
        )
        logger.info("Profile created", context={"profile_id": profile_id, "role": parsed.value})

        return UserProfile(
            id=profile_id,
            email=email,
            full_name=full_name,
            role_name=parsed.value,
        )

    async def find_profile(self, profile_id: str) -> UserProfile | None:
        """Get a profile by id, or None if it doesn't exist."""
        rows = await self.database.execute(
            "SELECT id, email, full_name, role FROM profiles WHERE id = :id",
            {"id": profile_id},
        )
        return _to_profile(rows[0]) if rows else None

    async def get_profile(self, profile_id: str) -> UserProfile:
        """Get a profile by id.

        Raises:
            ProfileNotFoundError: If the profile doesn't exist
        """
        profile = await self.find_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"Profile not found: {profile_id}")
        return profile

    async def list_profiles(self, role: Role | str | None = None) -> list[UserProfile]:
        """List profiles, optionally only those with one role."""
        if role is None:
            rows = await self.database.execute(
                "SELECT id, email, full_name, role FROM profiles ORDER BY email"
            )
        else:
            rows = await self.database.execute(
                "SELECT id, email, full_name, role FROM profiles WHERE role = :role ORDER BY email",
                {"role": _require_known(role).value},
            )
        return [_to_profile(r) for r in rows]

    async def update_role(self, profile_id: str, role: Role | str) -> UserProfile:
        """Change the role of a profile.

        Raises:
            InvalidRoleError: If the role is not a known role
            ProfileNotFoundError: If the profile doesn't exist
        """
        parsed = _require_known(role)

        async with self.database.transaction():
            previous = await self.get_profile(profile_id)
            await self.database.execute(
                "UPDATE profiles SET role = :role, updated_at = :updated_at WHERE id = :id",
                {"role": parsed.value, "updated_at": _now(), "id": profile_id},
            )
            # Read back what was stored; the row may be gone by now
            updated = await self.get_profile(profile_id)

        logger.info(
            "Profile role changed",
            context={
                "profile_id": profile_id,
                "previous_role": previous.role_name,
                "role": updated.role_name,
            },
        )
        return updated

    async def delete_profile(self, profile_id: str) -> None:
        """Delete a profile.

        Raises:
            ProfileNotFoundError: If the profile doesn't exist
        """
        await self.get_profile(profile_id)
        await self.database.execute(
            "DELETE FROM profiles WHERE id = :id",
            {"id": profile_id},
        )
        logger.info("Profile deleted", context={"profile_id": profile_id})
