"""Unit tests for UploadSession entity."""

import pytest
from datetime import datetime, timedelta, timezone
from domain.entities.upload_session import (
    UploadSession,
    SessionClosedError,
    SessionNotAuthenticatedError,
)
from domain.value_objects.conversation_id import ConversationId


class TestUploadSession:
    """Tests for UploadSession entity."""

    def test_create_session(self, conversation_id):
        """Test creating a session."""
        session = UploadSession.start(conversation_id)

        assert session.conversation_id == conversation_id
        assert session.is_active is True
        assert session.authenticated is False
        assert session.upload_count == 0
        assert session.started_at is not None

    def test_start_time_auto_set(self, conversation_id):
        """Test that started_at is auto-set."""
        before = datetime.now(timezone.utc)
        session = UploadSession(conversation_id=conversation_id)
        after = datetime.now(timezone.utc)

        assert before <= session.started_at <= after

    def test_negative_count_rejected(self, conversation_id):
        with pytest.raises(ValueError):
            UploadSession(conversation_id=conversation_id, upload_count=-1)

    def test_awaiting_password(self, session):
        assert session.awaiting_password is True
        assert session.can_upload is False

    def test_authenticate(self, session):
        session.authenticate()

        assert session.authenticated is True
        assert session.can_upload is True
        assert session.awaiting_password is False

    def test_authenticate_closed_session(self, session):
        session.close()

        with pytest.raises(SessionClosedError):
            session.authenticate()

    def test_record_upload(self, authenticated_session):
        assert authenticated_session.record_upload() == 1
        assert authenticated_session.record_upload() == 2
        assert authenticated_session.upload_count == 2

    def test_record_upload_requires_authentication(self, session):
        with pytest.raises(SessionNotAuthenticatedError):
            session.record_upload()
        assert session.upload_count == 0

    def test_record_upload_on_closed_session(self, authenticated_session):
        authenticated_session.record_upload()
        authenticated_session.close()

        with pytest.raises(SessionClosedError):
            authenticated_session.record_upload()
        assert authenticated_session.upload_count == 1

    def test_elapsed(self, session):
        later = session.started_at + timedelta(seconds=42)

        assert session.elapsed(now=later) == timedelta(seconds=42)

    def test_elapsed_never_negative(self, session):
        earlier = session.started_at - timedelta(seconds=5)

        assert session.elapsed(now=earlier) == timedelta(0)

    def test_elapsed_default_now(self, session):
        assert session.elapsed() >= timedelta(0)

    def test_to_dict(self, authenticated_session):
        authenticated_session.record_upload()

        data = authenticated_session.to_dict()

        assert data["conversation_id"] == 123456789
        assert data["authenticated"] is True
        assert data["upload_count"] == 1
        assert data["is_active"] is True
