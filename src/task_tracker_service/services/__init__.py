"""Service layer components."""

from task_tracker_service.services.account_service import AccountService
from task_tracker_service.services.authorization_gate import AuthorizationGate
from task_tracker_service.services.credential_store import CredentialStore
from task_tracker_service.services.password_hasher import PasswordHasher
from task_tracker_service.services.task_lifecycle import TaskLifecycleManager
from task_tracker_service.services.task_query import TaskQueryEngine
from task_tracker_service.services.task_store import TaskStore
from task_tracker_service.services.token_issuer import JWTTokenIssuer

__all__ = [
    "AccountService",
    "AuthorizationGate",
    "CredentialStore",
    "JWTTokenIssuer",
    "PasswordHasher",
    "TaskLifecycleManager",
    "TaskQueryEngine",
    "TaskStore",
]
