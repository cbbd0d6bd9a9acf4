from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional
from domain.entities.upload_session import UploadSession
from domain.value_objects.conversation_id import ConversationId


class UploadSessionRepository(ABC):
    """Repository interface for UploadSession aggregate"""

    @abstractmethod
    def get(self, conversation_id: ConversationId) -> Optional[UploadSession]:
        """Find the session of a conversation"""
        pass

    @abstractmethod
    def put(self, session: UploadSession) -> None:
        """Save session, replacing any previous one for the same conversation"""
        pass

    @abstractmethod
    def remove(self, conversation_id: ConversationId) -> Optional[UploadSession]:
        """Delete session and return it if it existed"""
        pass

    @abstractmethod
    def lock(self, conversation_id: ConversationId) -> AsyncContextManager[None]:
        """Lock serializing all work on one conversation's session"""
        pass

    @abstractmethod
    def active_count(self) -> int:
        """Number of sessions currently stored"""
        pass
