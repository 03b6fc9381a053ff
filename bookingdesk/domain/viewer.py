"""Per-request viewer context."""

from dataclasses import dataclass
from enum import Enum

from bookingdesk.domain.booking_state import ActorRole


class ViewerRole(str, Enum):
    """Who is looking at a booking list."""

    PROVIDER = "provider"
    USER = "user"
    ANONYMOUS = "anonymous"

    @property
    def actor_role(self) -> ActorRole | None:
        """Actor role this viewer may act as, if any."""
        if self is ViewerRole.ANONYMOUS:
            return None
        return ActorRole(self.value)


@dataclass(frozen=True)
class ViewerContext:
    """Resolved once per request by the currency settings provider."""

    role: ViewerRole
    preferred_currency_code: str
    viewer_id: int | None = None
