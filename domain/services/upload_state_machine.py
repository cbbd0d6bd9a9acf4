"""
Upload session state machine.

Pure decision logic: given the current session of a conversation and one
incoming event, decide what the session becomes and which outcome to report.
No I/O happens here; the orchestrator applies decisions to the store and
performs the storage call when asked to.

    NO_SESSION -> AWAITING_PASSWORD -> UPLOADING -> (completed | cancelled | rejected)

Terminal outcomes are not kept: the conversation is back in NO_SESSION.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.entities.upload_session import UploadSession
from domain.services.auth_policy import AuthPolicy
from domain.value_objects.conversation_id import ConversationId

DEFAULT_ALLOWED_EXTENSION = ".jar"


class SessionState(str, Enum):
    """Derived state of a conversation's upload flow"""

    NO_SESSION = "no_session"
    AWAITING_PASSWORD = "awaiting_password"
    UPLOADING = "uploading"


class UploadOutcome(str, Enum):
    """What happened, reported back to the user"""

    READY_TO_UPLOAD = "ready_to_upload"
    PASSWORD_REQUIRED = "password_required"
    AUTHENTICATED = "authenticated"
    PASSWORD_REJECTED = "password_rejected"
    STORE_FILE = "store_file"
    FILE_STORED = "file_stored"
    STORAGE_FAILURE = "storage_failure"
    INVALID_FILE_TYPE = "invalid_file_type"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_ACTIVE_SESSION = "no_active_session"
    NOT_AUTHENTICATED = "not_authenticated"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Decision:
    """
    Result of feeding one event to the state machine.

    session: the session the outcome is about (the ended one for terminal
             outcomes, None when the conversation had no session)
    retain:  True if the session must stay in the store, False if the
             conversation must end up with no session
    """

    outcome: UploadOutcome
    session: Optional[UploadSession] = None
    retain: bool = False

    @property
    def next_state(self) -> SessionState:
        if not self.retain or self.session is None:
            return SessionState.NO_SESSION
        return state_of(self.session)


def state_of(session: Optional[UploadSession]) -> SessionState:
    """Map a stored session to its state"""
    if session is None:
        return SessionState.NO_SESSION
    if session.can_upload:
        return SessionState.UPLOADING
    if session.awaiting_password:
        return SessionState.AWAITING_PASSWORD
    return SessionState.NO_SESSION


class UploadStateMachine:
    """Transition table for upload sessions"""

    def __init__(self, auth_policy: AuthPolicy, allowed_extension: str = DEFAULT_ALLOWED_EXTENSION):
        self.auth_policy = auth_policy
        self.allowed_extension = allowed_extension

    def is_allowed_file(self, file_name: Optional[str]) -> bool:
        return bool(file_name) and file_name.endswith(self.allowed_extension)

    # === Events ===

    def on_start_upload(
        self,
        conversation_id: ConversationId,
        current: Optional[UploadSession] = None,
    ) -> Decision:
        """Always starts a fresh session, replacing any current one"""
        if current is not None:
            current.close()
        verified = self.auth_policy.is_verified(conversation_id)
        session = UploadSession.start(conversation_id, authenticated=verified)
        outcome = UploadOutcome.READY_TO_UPLOAD if verified else UploadOutcome.PASSWORD_REQUIRED
        return Decision(outcome, session, retain=True)

    def on_text(self, session: Optional[UploadSession], text: str) -> Decision:
        state = state_of(session)
        if state is not SessionState.AWAITING_PASSWORD:
            # Plain chat outside the password prompt is left alone
            return Decision(UploadOutcome.IGNORED, session, retain=session is not None)

        if self.auth_policy.matches(text):
            session.authenticate()
            self.auth_policy.mark_verified(session.conversation_id)
            return Decision(UploadOutcome.AUTHENTICATED, session, retain=True)

        session.close()
        return Decision(UploadOutcome.PASSWORD_REJECTED, session, retain=False)

    def on_document(self, session: Optional[UploadSession], file_name: Optional[str]) -> Decision:
        """Decide whether a received document should be stored"""
        state = state_of(session)
        if state is SessionState.NO_SESSION:
            return Decision(UploadOutcome.NO_ACTIVE_SESSION, None, retain=False)
        if state is SessionState.AWAITING_PASSWORD:
            return Decision(UploadOutcome.NOT_AUTHENTICATED, session, retain=True)
        if not self.is_allowed_file(file_name):
            return Decision(UploadOutcome.INVALID_FILE_TYPE, session, retain=True)
        return Decision(UploadOutcome.STORE_FILE, session, retain=True)

    def on_store_succeeded(self, session: UploadSession) -> Decision:
        session.record_upload()
        return Decision(UploadOutcome.FILE_STORED, session, retain=True)

    def on_store_failed(self, session: UploadSession) -> Decision:
        return Decision(UploadOutcome.STORAGE_FAILURE, session, retain=True)

    def on_finish(self, session: Optional[UploadSession]) -> Decision:
        if state_of(session) is SessionState.NO_SESSION:
            return Decision(UploadOutcome.NO_ACTIVE_SESSION, None, retain=False)
        session.close()
        return Decision(UploadOutcome.COMPLETED, session, retain=False)

    def on_cancel(self, session: Optional[UploadSession]) -> Decision:
        if state_of(session) is SessionState.NO_SESSION:
            return Decision(UploadOutcome.NO_ACTIVE_SESSION, None, retain=False)
        session.close()
        return Decision(UploadOutcome.CANCELLED, session, retain=False)
