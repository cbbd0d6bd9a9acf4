"""Authentication scope value object.

Decides how far an accepted upload password reaches.
"""

from enum import Enum


class AuthScope(str, Enum):
    """Upload password scope.

    PER_CONVERSATION: every new upload session asks for the password.
    SHARED_ONCE: the first accepted password unlocks all later sessions
                 in every conversation until the process restarts.
    """

    PER_CONVERSATION = "per_conversation"
    SHARED_ONCE = "shared_once"

    @classmethod
    def parse(cls, raw: str) -> "AuthScope":
        """Parse a config value, accepting either case and dashes."""
        normalized = (raw or "").strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid auth scope '{raw}', expected one of: {allowed}")
