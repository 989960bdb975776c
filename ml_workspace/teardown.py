# ============================================================
# TEARDOWN (workspace, dependents, optional resource group)
# ============================================================
import logging

from .config import CONFIRMATION_TOKEN
from .models import ResourceKind, TeardownReport, WorkspaceIdentity
from .naming import derive_names

logger = logging.getLogger(__name__)


class ConsoleConfirmation:
    """Ask on the terminal; only the exact token counts as yes."""

    def __init__(self, token: str = CONFIRMATION_TOKEN, input_func=input):
        self.token = token
        self.input_func = input_func

    def confirm(self, prompt: str) -> bool:
        answer = self.input_func(f"{prompt} Type {self.token} to continue: ")
        return answer.strip() == self.token


class StaticConfirmation:
    """Fixed answer for non-interactive runs."""

    def __init__(self, answer: bool):
        self.answer = answer

    def confirm(self, prompt: str) -> bool:
        return self.answer


def matching_registries(registries, workspace_name: str) -> list:
    """Registries whose name contains the workspace name (best-effort ownership)."""
    needle = workspace_name.lower()
    return [registry for registry in registries if needle in str(registry.name).lower()]


def _delete_if_present(api, label: str, name: str, resource_group: str, report: TeardownReport) -> None:
    if not api.exists(name, resource_group):
        logger.info(f"{label} {name} not found, skipping")
        report.skipped.append(name)
        return
    logger.info(f"Deleting {label} {name}")
    api.delete(name, resource_group)
    report.deleted.append(name)


def delete_resource_group(resource_groups, name: str, confirmation) -> bool:
    """Start deleting the group after confirmation. Returns True if deletion started."""
    prompt = f"This permanently deletes resource group '{name}' and everything in it."
    if not confirmation.confirm(prompt):
        logger.info(f"Resource group {name} kept (not confirmed)")
        return False
    logger.warning(f"Deleting resource group {name}; not waiting for completion")
    resource_groups.delete(name)
    return True


def teardown_workspace(
    session,
    identity: WorkspaceIdentity,
    delete_group: bool = False,
    confirmation=None,
) -> TeardownReport:
    report = TeardownReport()
    resource_group = identity.resource_group

    if not session.resource_groups.exists(resource_group):
        logger.info(f"Resource group {resource_group} not found, nothing to delete")
        return report

    names = derive_names(identity.workspace_name)
    _delete_if_present(session.workspaces, "Workspace", identity.workspace_name, resource_group, report)
    _delete_if_present(session.storage, "Storage account", names[ResourceKind.STORAGE], resource_group, report)
    _delete_if_present(
        session.telemetry, "Application Insights", names[ResourceKind.APPINSIGHTS], resource_group, report
    )
    _delete_if_present(session.vaults, "Key vault", names[ResourceKind.KEYVAULT], resource_group, report)

    for registry in matching_registries(session.registries.list(resource_group), identity.workspace_name):
        logger.info(f"Deleting container registry {registry.name}")
        session.registries.delete(registry.name, resource_group)
        report.deleted.append(registry.name)

    if delete_group:
        confirmation = confirmation or ConsoleConfirmation()
        report.resource_group_deletion_started = delete_resource_group(
            session.resource_groups, resource_group, confirmation
        )

    return report
