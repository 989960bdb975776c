# ============================================================
# IDEMPOTENT PROVISIONING (create missing, reuse existing)
# ============================================================
import logging
import time

from .config import RECLAIM_DELAY_SECONDS, RECLAIM_MAX_ATTEMPTS
from .models import ProvisionedResources, ResourceKind, WorkspaceIdentity
from .naming import derive_names
from .reclaim import reclaim_vault_name

logger = logging.getLogger(__name__)


def ensure_resource_group(resource_groups, name: str, region: str) -> bool:
    """Create the resource group if missing. Returns True when it was created."""
    if resource_groups.exists(name):
        logger.info(f"Using existing resource group {name}")
        return False
    logger.info(f"Creating resource group {name} in {region}")
    resource_groups.create(name, region)
    return True


def _ensure(api, label: str, name: str, resource_group: str, region: str, **options) -> tuple[str, bool]:
    if api.exists(name, resource_group):
        logger.info(f"Using existing {label} {name}")
        return api.get_id(name, resource_group), False
    logger.info(f"Creating {label} {name} in {region}")
    return api.create(name, resource_group, region, **options), True


def ensure_storage(storage, name: str, resource_group: str, region: str) -> tuple[str, bool]:
    return _ensure(storage, "storage account", name, resource_group, region)


def ensure_telemetry(telemetry, name: str, resource_group: str, region: str) -> tuple[str, bool]:
    return _ensure(telemetry, "Application Insights", name, resource_group, region)


def ensure_vault(
    vaults,
    name: str,
    resource_group: str,
    region: str,
    max_attempts: int = RECLAIM_MAX_ATTEMPTS,
    delay_seconds: float = RECLAIM_DELAY_SECONDS,
    sleep=time.sleep,
) -> tuple[str, bool, bool]:
    """
    Create or reuse the key vault, purging a soft-deleted one holding the name first.

    Returns (vault id, created, purged). NameLockedError from the reclaim is not
    caught: creating into a locked name fails half way.
    """
    purged = reclaim_vault_name(
        vaults,
        name,
        resource_group,
        region,
        max_attempts=max_attempts,
        delay_seconds=delay_seconds,
        sleep=sleep,
    )
    vault_id, created = _ensure(vaults, "key vault", name, resource_group, region)
    return vault_id, created, purged


def ensure_workspace(
    workspaces,
    name: str,
    resource_group: str,
    region: str,
    *,
    storage_account: str,
    key_vault: str,
    application_insights: str,
) -> tuple[str, bool]:
    return _ensure(
        workspaces,
        "workspace",
        name,
        resource_group,
        region,
        storage_account=storage_account,
        key_vault=key_vault,
        application_insights=application_insights,
    )


def provision_workspace(
    session,
    identity: WorkspaceIdentity,
    max_attempts: int = RECLAIM_MAX_ATTEMPTS,
    delay_seconds: float = RECLAIM_DELAY_SECONDS,
    sleep=time.sleep,
) -> ProvisionedResources:
    """Bring the workspace and its dependents into existence, reusing what is there."""
    names = derive_names(identity.workspace_name)
    resource_group = identity.resource_group
    region = identity.region
    created = []

    if ensure_resource_group(session.resource_groups, resource_group, region):
        created.append("resource_group")

    storage_id, was_created = ensure_storage(
        session.storage, names[ResourceKind.STORAGE], resource_group, region
    )
    if was_created:
        created.append(ResourceKind.STORAGE.value)

    insights_id, was_created = ensure_telemetry(
        session.telemetry, names[ResourceKind.APPINSIGHTS], resource_group, region
    )
    if was_created:
        created.append(ResourceKind.APPINSIGHTS.value)

    vault_id, was_created, purged = ensure_vault(
        session.vaults,
        names[ResourceKind.KEYVAULT],
        resource_group,
        region,
        max_attempts=max_attempts,
        delay_seconds=delay_seconds,
        sleep=sleep,
    )
    if was_created:
        created.append(ResourceKind.KEYVAULT.value)

    workspace_id, was_created = ensure_workspace(
        session.workspaces,
        identity.workspace_name,
        resource_group,
        region,
        storage_account=storage_id,
        key_vault=vault_id,
        application_insights=insights_id,
    )
    if was_created:
        created.append("workspace")

    logger.info(
        f"Workspace {identity.workspace_name} ready in {resource_group}"
        + (f" (created: {', '.join(created)})" if created else " (nothing to create)")
    )
    return ProvisionedResources(
        storage_id=storage_id,
        key_vault_id=vault_id,
        application_insights_id=insights_id,
        workspace_id=workspace_id,
        created=created,
        vault_purged=purged,
    )
