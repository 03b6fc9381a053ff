"""Profile lookups for booking counterparts."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.config import settings
from bookingdesk.core.exceptions import NotFoundError
from bookingdesk.models.user import User

PLACEHOLDER_TEXT = "-"


@dataclass(frozen=True)
class Profile:
    """Display data for one party of a booking."""

    name: str
    phone: str
    avatar_path: str

    @classmethod
    def placeholder(cls) -> "Profile":
        """Shown when a counterpart record cannot be resolved."""
        return cls(
            name=PLACEHOLDER_TEXT,
            phone=PLACEHOLDER_TEXT,
            avatar_path=settings.default_avatar_path,
        )


class ProfileService:
    """Resolves customer profiles."""

    @staticmethod
    def _to_profile(record: User) -> Profile:
        return Profile(
            name=record.name or PLACEHOLDER_TEXT,
            phone=record.mobileno or PLACEHOLDER_TEXT,
            avatar_path=record.profile_img or settings.default_avatar_path,
        )

    async def get_profile(self, db: AsyncSession, user_id: int | None) -> Profile:
        """Profile of a customer.

        Raises:
            NotFoundError: No user with this ID
        """
        if user_id is None:
            raise NotFoundError("User")
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))
        return self._to_profile(user)


profile_service = ProfileService()
