"""
Upload password policy.

Holds the configured secret and the authentication scope. With
AuthScope.SHARED_ONCE the policy also owns the process-wide "password was
entered" flag; nothing is written to disk.
"""

import hmac
import logging

from domain.value_objects.auth_scope import AuthScope
from domain.value_objects.conversation_id import ConversationId

logger = logging.getLogger(__name__)


class AuthPolicy:
    """Checks upload passwords and remembers which scope they unlocked"""

    def __init__(self, password: str, scope: AuthScope = AuthScope.PER_CONVERSATION):
        if not password:
            raise ValueError("Upload password must not be empty")
        self._password = password
        self.scope = scope
        self._shared_verified = False

    def matches(self, candidate: str) -> bool:
        """Exact comparison against the configured password"""
        if candidate is None:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._password.encode("utf-8"))

    def is_verified(self, conversation_id: ConversationId) -> bool:
        """Whether a new session in this conversation may skip the prompt"""
        if self.scope is AuthScope.SHARED_ONCE:
            return self._shared_verified
        return False

    def mark_verified(self, conversation_id: ConversationId) -> None:
        """Record an accepted password"""
        if self.scope is AuthScope.SHARED_ONCE and not self._shared_verified:
            self._shared_verified = True
            logger.info(f"[{conversation_id}] Shared upload password accepted, prompt disabled for all chats")
