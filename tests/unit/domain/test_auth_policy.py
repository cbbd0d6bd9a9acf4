"""Unit tests for AuthScope and AuthPolicy."""

import pytest
from domain.services.auth_policy import AuthPolicy
from domain.value_objects.auth_scope import AuthScope
from domain.value_objects.conversation_id import ConversationId


class TestAuthScope:

    @pytest.mark.parametrize("raw,expected", [
        ("per_conversation", AuthScope.PER_CONVERSATION),
        ("PER-CONVERSATION", AuthScope.PER_CONVERSATION),
        (" shared_once ", AuthScope.SHARED_ONCE),
        ("Shared-Once", AuthScope.SHARED_ONCE),
    ])
    def test_parse(self, raw, expected):
        assert AuthScope.parse(raw) is expected

    def test_parse_invalid(self):
        with pytest.raises(ValueError, match="Invalid auth scope"):
            AuthScope.parse("global")


class TestAuthPolicy:

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            AuthPolicy(password="")

    def test_matches_exact(self, auth_policy, password):
        assert auth_policy.matches(password) is True

    @pytest.mark.parametrize("candidate", ["S3CRET", "s3cret ", " s3cret", "", None])
    def test_no_partial_match(self, auth_policy, candidate):
        assert auth_policy.matches(candidate) is False

    def test_per_conversation_never_verified(self, auth_policy, conversation_id):
        auth_policy.mark_verified(conversation_id)

        assert auth_policy.is_verified(conversation_id) is False
        assert auth_policy.is_verified(ConversationId(77)) is False

    def test_shared_once_verified_everywhere(self, shared_auth_policy, conversation_id):
        assert shared_auth_policy.is_verified(conversation_id) is False

        shared_auth_policy.mark_verified(conversation_id)

        assert shared_auth_policy.is_verified(conversation_id) is True
        assert shared_auth_policy.is_verified(ConversationId(77)) is True
