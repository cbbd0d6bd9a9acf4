"""
Upload Service

Orchestrates upload sessions: feeds chat events to the state machine while
holding the conversation's lock, applies the decisions to the session store
and talks to the storage gateway.

Events of one conversation are handled strictly one after another; events
of different conversations run concurrently.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Awaitable, BinaryIO, Callable, List, Optional

from domain.entities.stored_file import StoredFile
from domain.repositories.upload_session_repository import UploadSessionRepository
from domain.services.storage_gateway import IStorageGateway, StorageError
from domain.services.upload_state_machine import (
    Decision,
    SessionState,
    UploadOutcome,
    UploadStateMachine,
    state_of,
)
from domain.value_objects.conversation_id import ConversationId

logger = logging.getLogger(__name__)

FileFetcher = Callable[[], Awaitable[BinaryIO]]
ProgressCallback = Callable[["UploadResult"], Awaitable[None]]


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one event, with the numbers the reply needs"""

    outcome: UploadOutcome
    conversation_id: ConversationId
    upload_count: int = 0
    file_name: Optional[str] = None
    elapsed: Optional[timedelta] = None
    error: Optional[str] = None

    @property
    def needs_reply(self) -> bool:
        return self.outcome is not UploadOutcome.IGNORED


class UploadService:
    """Application service for the upload flow"""

    def __init__(
        self,
        session_store: UploadSessionRepository,
        state_machine: UploadStateMachine,
        storage: IStorageGateway,
    ):
        self.session_store = session_store
        self.state_machine = state_machine
        self.storage = storage

    # === Session commands ===

    async def start_upload(self, conversation_id: ConversationId) -> UploadResult:
        async with self.session_store.lock(conversation_id):
            current = self.session_store.get(conversation_id)
            decision = self.state_machine.on_start_upload(conversation_id, current)
            self._apply(conversation_id, decision)
            logger.info(
                f"[{conversation_id}] Upload session started "
                f"({decision.next_state.value}, active sessions: {self.session_store.active_count()})"
            )
            return self._result(conversation_id, decision)

    async def submit_text(self, conversation_id: ConversationId, text: str) -> UploadResult:
        async with self.session_store.lock(conversation_id):
            session = self.session_store.get(conversation_id)
            decision = self.state_machine.on_text(session, text)
            self._apply(conversation_id, decision)
            if decision.outcome is UploadOutcome.AUTHENTICATED:
                logger.info(f"[{conversation_id}] Upload password accepted")
            elif decision.outcome is UploadOutcome.PASSWORD_REJECTED:
                logger.warning(f"[{conversation_id}] Wrong upload password, session closed")
            return self._result(conversation_id, decision)

    async def finish(self, conversation_id: ConversationId) -> UploadResult:
        async with self.session_store.lock(conversation_id):
            decision = self.state_machine.on_finish(self.session_store.get(conversation_id))
            self._apply(conversation_id, decision)
            result = self._result(conversation_id, decision)
            if decision.outcome is UploadOutcome.COMPLETED:
                logger.info(
                    f"[{conversation_id}] Upload session completed: "
                    f"{result.upload_count} files in {result.elapsed}"
                )
            return result

    async def cancel(self, conversation_id: ConversationId) -> UploadResult:
        async with self.session_store.lock(conversation_id):
            decision = self.state_machine.on_cancel(self.session_store.get(conversation_id))
            self._apply(conversation_id, decision)
            if decision.outcome is UploadOutcome.CANCELLED:
                logger.info(
                    f"[{conversation_id}] Upload session cancelled after "
                    f"{decision.session.upload_count} files"
                )
            return self._result(conversation_id, decision)

    def get_state(self, conversation_id: ConversationId) -> SessionState:
        return state_of(self.session_store.get(conversation_id))

    # === Documents ===

    async def submit_document(
        self,
        conversation_id: ConversationId,
        file_name: Optional[str],
        fetch: FileFetcher,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadResult:
        """
        Handle a received document.

        The file is only downloaded (via fetch) once the state machine agreed
        to store it. The conversation lock is held across the storage call so
        concurrent documents in one chat are counted one by one.

        Args:
            conversation_id: Chat the document came from
            file_name: Original file name, may be None
            fetch: Coroutine factory returning a binary reader with the content
            on_progress: Called before the upload starts
        """
        async with self.session_store.lock(conversation_id):
            session = self.session_store.get(conversation_id)
            decision = self.state_machine.on_document(session, file_name)
            if decision.outcome is not UploadOutcome.STORE_FILE:
                self._apply(conversation_id, decision)
                return self._result(conversation_id, decision, file_name=file_name)

            if on_progress:
                await on_progress(self._result(conversation_id, decision, file_name=file_name))

            try:
                reader = await fetch()
            except Exception as e:
                logger.error(f"[{conversation_id}] Error downloading {file_name}: {e}", exc_info=True)
                return self._failure(conversation_id, session, file_name, f"Telegram download error: {e}")

            try:
                stored = await self.storage.store(file_name, reader)
            except StorageError as e:
                logger.error(f"[{conversation_id}] Error storing {file_name}: {e}", exc_info=True)
                return self._failure(conversation_id, session, file_name, str(e))
            finally:
                reader.close()

            decision = self.state_machine.on_store_succeeded(session)
            self._apply(conversation_id, decision)
            logger.info(
                f"[{conversation_id}] Stored {stored.name} ({stored.file_id}), "
                f"session total: {session.upload_count}"
            )
            return self._result(conversation_id, decision, file_name=file_name)

    # === Folder queries ===

    async def list_files(self) -> List[StoredFile]:
        """Current folder listing, independent of any session"""
        return await self.storage.list_children()

    async def count_files(self) -> int:
        return len(await self.storage.list_children())

    # === Helpers ===

    def _failure(self, conversation_id, session, file_name, error: str) -> UploadResult:
        decision = self.state_machine.on_store_failed(session)
        self._apply(conversation_id, decision)
        return self._result(conversation_id, decision, file_name=file_name, error=error)

    def _apply(self, conversation_id: ConversationId, decision: Decision) -> None:
        if decision.retain and decision.session is not None:
            self.session_store.put(decision.session)
        else:
            removed = self.session_store.remove(conversation_id)
            if removed is not None:
                logger.debug(f"[{conversation_id}] Upload session ended: {removed.to_dict()}")

    @staticmethod
    def _result(
        conversation_id: ConversationId,
        decision: Decision,
        file_name: Optional[str] = None,
        error: Optional[str] = None,
    ) -> UploadResult:
        session = decision.session
        elapsed = None
        if decision.outcome is UploadOutcome.COMPLETED:
            elapsed = session.elapsed()
        return UploadResult(
            outcome=decision.outcome,
            conversation_id=conversation_id,
            upload_count=session.upload_count if session else 0,
            file_name=file_name,
            elapsed=elapsed,
            error=error,
        )
