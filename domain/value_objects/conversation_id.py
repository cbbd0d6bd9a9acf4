from dataclasses import dataclass


@dataclass(frozen=True)
class ConversationId:
    """Value object identifying a Telegram chat (negative for groups)"""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value == 0:
            raise ValueError("ConversationId must be a non-zero integer")

    @classmethod
    def from_int(cls, value: int) -> "ConversationId":
        """Create ConversationId from a chat id"""
        return cls(value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
