# ============================================================
# DATA MODEL
# ============================================================
from dataclasses import dataclass, field
from enum import Enum


class ResourceKind(str, Enum):
    STORAGE = "storage"
    KEYVAULT = "keyvault"
    APPINSIGHTS = "appinsights"


class ExistenceState(str, Enum):
    ABSENT = "absent"
    ACTIVE = "active"
    SOFT_DELETED = "soft-deleted"


@dataclass(frozen=True)
class WorkspaceIdentity:
    """Immutable input that every derived resource name comes from."""

    subscription_id: str
    resource_group: str
    workspace_name: str
    region: str


@dataclass(frozen=True)
class VaultProbe:
    """One observation of a vault name, active and soft-deleted namespaces."""

    exists_active: bool
    exists_deleted: bool

    @property
    def available(self) -> bool:
        return not self.exists_active and not self.exists_deleted

    @property
    def state(self) -> ExistenceState:
        if self.exists_active:
            return ExistenceState.ACTIVE
        if self.exists_deleted:
            return ExistenceState.SOFT_DELETED
        return ExistenceState.ABSENT


@dataclass(frozen=True)
class ReclamationAttempt:
    attempt_number: int
    max_attempts: int
    delay_seconds: float

    @property
    def is_last(self) -> bool:
        return self.attempt_number >= self.max_attempts


@dataclass
class ProvisionedResources:
    storage_id: str
    key_vault_id: str
    application_insights_id: str
    workspace_id: str
    created: list[str] = field(default_factory=list)
    vault_purged: bool = False


@dataclass
class TeardownReport:
    deleted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    resource_group_deletion_started: bool = False
