# ============================================================
# ML WORKSPACE LIFECYCLE PACKAGE
# ============================================================
from .client import Session, authenticate
from .errors import AuthError, NameLockedError, ProviderOperationError, WorkspaceLifecycleError
from .models import ResourceKind, WorkspaceIdentity
from .naming import derive_name, derive_names
from .provision import provision_workspace
from .reclaim import reclaim_vault_name, wait_for_availability
from .teardown import ConsoleConfirmation, StaticConfirmation, teardown_workspace

__all__ = [
    "AuthError",
    "ConsoleConfirmation",
    "NameLockedError",
    "ProviderOperationError",
    "ResourceKind",
    "Session",
    "StaticConfirmation",
    "WorkspaceIdentity",
    "WorkspaceLifecycleError",
    "authenticate",
    "derive_name",
    "derive_names",
    "provision_workspace",
    "reclaim_vault_name",
    "teardown_workspace",
    "wait_for_availability",
]
