"""
Upload Session Entity

Tracks one conversation's upload flow: whether the password was accepted,
how many files were stored, and when the flow started.

Sessions are never kept once inactive; the store drops them on close.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from domain.value_objects.conversation_id import ConversationId


class SessionError(Exception):
    """Base exception for upload session errors"""
    pass


class SessionClosedError(SessionError):
    """Raised when trying to modify a closed session"""
    pass


class SessionNotAuthenticatedError(SessionError):
    """Raised when recording an upload before the password was accepted"""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UploadSession:
    """
    Upload session entity.

    Business rules:
    - upload_count never decreases
    - uploads are recorded only while active and authenticated
    - a closed session cannot be reopened
    """

    conversation_id: ConversationId
    is_active: bool = True
    authenticated: bool = False
    upload_count: int = 0
    started_at: datetime = None

    def __post_init__(self):
        if self.started_at is None:
            self.started_at = _utcnow()
        if self.upload_count < 0:
            raise ValueError("upload_count must be non-negative")

    @classmethod
    def start(cls, conversation_id: ConversationId, authenticated: bool = False) -> "UploadSession":
        """Create a fresh session for a conversation"""
        return cls(conversation_id=conversation_id, authenticated=authenticated)

    # === Business Rules ===

    def authenticate(self) -> None:
        """
        Mark the password as accepted for this session.

        Raises:
            SessionClosedError: If session is closed
        """
        if not self.is_active:
            raise SessionClosedError(
                f"Cannot authenticate closed session for {self.conversation_id}"
            )
        self.authenticated = True

    def record_upload(self) -> int:
        """
        Count one successfully stored file.

        Raises:
            SessionClosedError: If session is closed
            SessionNotAuthenticatedError: If password was not accepted yet

        Returns:
            New upload count
        """
        if not self.is_active:
            raise SessionClosedError(
                f"Cannot record upload on closed session for {self.conversation_id}"
            )
        if not self.authenticated:
            raise SessionNotAuthenticatedError(
                f"Session for {self.conversation_id} is not authenticated"
            )
        self.upload_count += 1
        return self.upload_count

    def close(self) -> None:
        """Close the session"""
        self.is_active = False

    def elapsed(self, now: Optional[datetime] = None) -> timedelta:
        """Time since the session started, never negative"""
        delta = (now or _utcnow()) - self.started_at
        return max(delta, timedelta(0))

    # === Properties ===

    @property
    def awaiting_password(self) -> bool:
        return self.is_active and not self.authenticated

    @property
    def can_upload(self) -> bool:
        return self.is_active and self.authenticated

    def to_dict(self) -> dict:
        """Convert to dictionary for logging"""
        return {
            "conversation_id": int(self.conversation_id),
            "is_active": self.is_active,
            "authenticated": self.authenticated,
            "upload_count": self.upload_count,
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }
