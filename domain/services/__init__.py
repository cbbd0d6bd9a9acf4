"""Domain services"""

from domain.services.auth_policy import AuthPolicy
from domain.services.storage_gateway import IStorageGateway, StorageError, GatewayInitError
from domain.services.upload_state_machine import (
    Decision,
    SessionState,
    UploadOutcome,
    UploadStateMachine,
    state_of,
)

__all__ = [
    "AuthPolicy",
    "IStorageGateway",
    "StorageError",
    "GatewayInitError",
    "Decision",
    "SessionState",
    "UploadOutcome",
    "UploadStateMachine",
    "state_of",
]
