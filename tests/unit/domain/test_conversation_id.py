"""Unit tests for ConversationId value object."""

import pytest
from domain.value_objects.conversation_id import ConversationId


class TestConversationId:

    def test_private_chat(self):
        cid = ConversationId(42)
        assert int(cid) == 42
        assert str(cid) == "42"

    def test_group_chat_is_negative(self):
        cid = ConversationId.from_int(-100123)
        assert cid.value == -100123

    @pytest.mark.parametrize("value", [0, "1", 1.5, True, None])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            ConversationId(value)

    def test_hashable_and_equal(self):
        assert {ConversationId(1): "a"}[ConversationId(1)] == "a"
