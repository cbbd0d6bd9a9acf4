"""Domain value objects"""

from domain.value_objects.auth_scope import AuthScope
from domain.value_objects.conversation_id import ConversationId

__all__ = [
    "AuthScope",
    "ConversationId",
]
