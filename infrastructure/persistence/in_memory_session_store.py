"""
In-memory upload session store.

Sessions live only for the lifetime of the process; a restart silently
drops every open upload flow.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from domain.entities.upload_session import UploadSession
from domain.repositories.upload_session_repository import UploadSessionRepository
from domain.value_objects.conversation_id import ConversationId

logger = logging.getLogger(__name__)


class InMemorySessionStore(UploadSessionRepository):
    """Dict-backed session store with one asyncio.Lock per conversation"""

    def __init__(self):
        self._sessions: Dict[ConversationId, UploadSession] = {}
        self._locks: Dict[ConversationId, asyncio.Lock] = {}
        self._lock_users: Dict[ConversationId, int] = {}

    def get(self, conversation_id: ConversationId) -> Optional[UploadSession]:
        return self._sessions.get(conversation_id)

    def put(self, session: UploadSession) -> None:
        if not session.is_active:
            raise ValueError("Only active sessions can be stored")
        previous = self._sessions.get(session.conversation_id)
        if previous is not None and previous is not session:
            logger.info(f"[{session.conversation_id}] Replacing existing upload session")
        self._sessions[session.conversation_id] = session

    def remove(self, conversation_id: ConversationId) -> Optional[UploadSession]:
        return self._sessions.pop(conversation_id, None)

    @asynccontextmanager
    async def lock(self, conversation_id: ConversationId) -> AsyncIterator[None]:
        """
        Hold the conversation's lock.

        Holders and waiters are counted; the last one out drops the lock
        unless the conversation still has a session, so idle chats leave
        nothing behind.
        """
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        self._lock_users[conversation_id] = self._lock_users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[conversation_id] -= 1
            if not self._lock_users[conversation_id]:
                del self._lock_users[conversation_id]
                if conversation_id not in self._sessions:
                    del self._locks[conversation_id]

    def active_count(self) -> int:
        return len(self._sessions)
