"""
Pytest configuration and shared fixtures for the test suite.
"""

import os
import pytest
from typing import List
from unittest.mock import Mock, AsyncMock

# Set required environment variables BEFORE any application imports
os.environ.setdefault("TELEGRAM_TOKEN", "test-telegram-token-12345")
os.environ.setdefault("UPLOAD_PASSWORD", "s3cret")

from application.services.upload_service import UploadService
from domain.entities.stored_file import StoredFile
from domain.entities.upload_session import UploadSession
from domain.services.auth_policy import AuthPolicy
from domain.services.upload_state_machine import UploadStateMachine
from domain.value_objects.auth_scope import AuthScope
from domain.value_objects.conversation_id import ConversationId
from infrastructure.persistence.in_memory_session_store import InMemorySessionStore

PASSWORD = "s3cret"


# ============================================================================
# Value Object Fixtures
# ============================================================================

@pytest.fixture
def password() -> str:
    """The configured upload password."""
    return PASSWORD


@pytest.fixture
def conversation_id() -> ConversationId:
    """Create a test ConversationId."""
    return ConversationId(123456789)


@pytest.fixture
def other_conversation_id() -> ConversationId:
    """A second chat (group chats have negative ids)."""
    return ConversationId(-100987654321)


# ============================================================================
# Entity Fixtures
# ============================================================================

@pytest.fixture
def session(conversation_id: ConversationId) -> UploadSession:
    """Create a fresh, unauthenticated session."""
    return UploadSession.start(conversation_id)


@pytest.fixture
def authenticated_session(conversation_id: ConversationId) -> UploadSession:
    """Create a session that already accepted the password."""
    return UploadSession.start(conversation_id, authenticated=True)


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def auth_policy() -> AuthPolicy:
    """Per-conversation password policy."""
    return AuthPolicy(password=PASSWORD, scope=AuthScope.PER_CONVERSATION)


@pytest.fixture
def shared_auth_policy() -> AuthPolicy:
    """Process-wide password policy."""
    return AuthPolicy(password=PASSWORD, scope=AuthScope.SHARED_ONCE)


@pytest.fixture
def state_machine(auth_policy: AuthPolicy) -> UploadStateMachine:
    return UploadStateMachine(auth_policy)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def stored_files() -> List[StoredFile]:
    """Contents of the fake storage folder, appended to by store()."""
    return [StoredFile(file_id="existing-1", name="existing.jar")]


@pytest.fixture
def mock_storage(stored_files: List[StoredFile]) -> Mock:
    """Storage gateway mock that records stored files in stored_files."""
    storage = Mock()

    async def store(file_name, reader):
        stored = StoredFile(file_id=f"id-{len(stored_files)}", name=file_name)
        stored_files.append(stored)
        return stored

    async def list_children():
        return list(stored_files)

    storage.store = AsyncMock(side_effect=store)
    storage.list_children = AsyncMock(side_effect=list_children)
    return storage


@pytest.fixture
def upload_service(session_store, state_machine, mock_storage) -> UploadService:
    """UploadService with in-memory store and mocked storage."""
    return UploadService(
        session_store=session_store,
        state_machine=state_machine,
        storage=mock_storage,
    )


@pytest.fixture
def fetch_file():
    """Factory returning an async fetcher that yields a readable file."""
    def factory(content: bytes = b"PK\x03\x04jar"):
        reader = Mock()
        reader.read = Mock(return_value=content)
        reader.close = Mock()
        return AsyncMock(return_value=reader)
    return factory


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def make_message():
    """Factory for aiogram Message mocks."""
    def factory(chat_id: int = 123456789, text: str = None, file_name: str = None):
        message = Mock()
        message.chat = Mock(id=chat_id)
        message.text = text
        message.answer = AsyncMock()
        message.bot = Mock()
        message.bot.download = AsyncMock()
        if file_name is not None:
            message.document = Mock(file_name=file_name, file_id="tg-file-id")
        else:
            message.document = None
        return message
    return factory
