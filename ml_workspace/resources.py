# ============================================================
# AZURE RESOURCE APIS (existence / create / delete per kind)
# ============================================================
import logging

from azure.ai.ml.entities import Workspace
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from .config import APPINSIGHTS_KIND, KEYVAULT_SKU, STORAGE_KIND, STORAGE_SKU
from .errors import ProviderOperationError

logger = logging.getLogger(__name__)


def _provider_call(description: str, operation, *args, **kwargs):
    try:
        return operation(*args, **kwargs)
    except HttpResponseError as error:
        message = getattr(error, "message", None) or str(error)
        raise ProviderOperationError(f"{description} failed: {message}") from error


def _exists(operation, *args, **kwargs) -> bool:
    try:
        operation(*args, **kwargs)
        return True
    except ResourceNotFoundError:
        return False


class ResourceGroupApi:
    def __init__(self, client):
        self.client = client

    def exists(self, name: str) -> bool:
        return bool(self.client.resource_groups.check_existence(name))

    def create(self, name: str, region: str):
        return _provider_call(
            f"Creating resource group {name}",
            self.client.resource_groups.create_or_update,
            resource_group_name=name,
            parameters={"location": region},
        )

    def delete(self, name: str):
        """Start deleting the group and return the poller without waiting on it."""
        return _provider_call(
            f"Deleting resource group {name}",
            self.client.resource_groups.begin_delete,
            name,
        )


class StorageApi:
    def __init__(self, client):
        self.client = client

    def exists(self, name: str, resource_group: str) -> bool:
        return _exists(self.client.storage_accounts.get_properties, resource_group, name)

    def get_id(self, name: str, resource_group: str) -> str:
        return self.client.storage_accounts.get_properties(resource_group, name).id

    def create(self, name: str, resource_group: str, region: str) -> str:
        params = {
            "location": region,
            "kind": STORAGE_KIND,
            "sku": {"name": STORAGE_SKU},
            "allow_blob_public_access": False,
            "minimum_tls_version": "TLS1_2",
        }
        account = _provider_call(
            f"Creating storage account {name}",
            lambda: self.client.storage_accounts.begin_create(resource_group, name, params).result(),
        )
        return account.id

    def delete(self, name: str, resource_group: str) -> None:
        _provider_call(
            f"Deleting storage account {name}",
            self.client.storage_accounts.delete,
            resource_group,
            name,
        )

    def list(self, resource_group: str) -> list:
        return list(self.client.storage_accounts.list_by_resource_group(resource_group))


class TelemetryApi:
    """Application Insights components."""

    def __init__(self, client):
        self.client = client

    def exists(self, name: str, resource_group: str) -> bool:
        return _exists(self.client.components.get, resource_group, name)

    def get_id(self, name: str, resource_group: str) -> str:
        return self.client.components.get(resource_group, name).id

    def create(self, name: str, resource_group: str, region: str) -> str:
        params = {
            "location": region,
            "kind": APPINSIGHTS_KIND,
            "application_type": APPINSIGHTS_KIND,
        }
        component = _provider_call(
            f"Creating Application Insights {name}",
            self.client.components.create_or_update,
            resource_group,
            name,
            params,
        )
        return component.id

    def delete(self, name: str, resource_group: str) -> None:
        _provider_call(
            f"Deleting Application Insights {name}",
            self.client.components.delete,
            resource_group,
            name,
        )

    def list(self, resource_group: str) -> list:
        return list(self.client.components.list_by_resource_group(resource_group))


class VaultApi:
    """Key vaults, including the soft-deleted namespace partitioned by region."""

    def __init__(self, client, tenant_id: str):
        self.client = client
        self.tenant_id = tenant_id

    def exists(self, name: str, resource_group: str) -> bool:
        # Only this resource group; an active vault of the same name elsewhere
        # reads as absent and the later create fails with ProviderOperationError.
        return _exists(self.client.vaults.get, resource_group, name)

    def exists_soft_deleted(self, name: str, region: str) -> bool:
        return _exists(self.client.vaults.get_deleted, vault_name=name, location=region)

    def purge_soft_deleted(self, name: str, region: str):
        """Start the purge and return the poller; the name frees up some time later."""
        return _provider_call(
            f"Purging soft-deleted key vault {name}",
            self.client.vaults.begin_purge_deleted_vault,
            vault_name=name,
            location=region,
        )

    def get_id(self, name: str, resource_group: str) -> str:
        return self.client.vaults.get(resource_group, name).id

    def create(self, name: str, resource_group: str, region: str) -> str:
        params = {
            "location": region,
            "properties": {
                "tenant_id": self.tenant_id,
                "sku": {"family": "A", "name": KEYVAULT_SKU},
                "access_policies": [],
                "enable_soft_delete": True,
            },
        }
        vault = _provider_call(
            f"Creating key vault {name}",
            lambda: self.client.vaults.begin_create_or_update(resource_group, name, params).result(),
        )
        return vault.id

    def delete(self, name: str, resource_group: str) -> None:
        _provider_call(
            f"Deleting key vault {name}",
            self.client.vaults.delete,
            resource_group,
            name,
        )

    def list(self, resource_group: str) -> list:
        return list(self.client.vaults.list_by_resource_group(resource_group))


class RegistryApi:
    """Container registries; only enumerated and deleted, never created here."""

    def __init__(self, client):
        self.client = client

    def exists(self, name: str, resource_group: str) -> bool:
        return _exists(self.client.registries.get, resource_group, name)

    def delete(self, name: str, resource_group: str) -> None:
        _provider_call(
            f"Deleting container registry {name}",
            lambda: self.client.registries.begin_delete(resource_group, name).result(),
        )

    def list(self, resource_group: str) -> list:
        return list(self.client.registries.list_by_resource_group(resource_group))


class WorkspaceApi:
    """Azure ML workspaces through MLClient (one client per resource group)."""

    def __init__(self, ml_client_factory):
        self.ml_client_factory = ml_client_factory

    def exists(self, name: str, resource_group: str) -> bool:
        return _exists(self.ml_client_factory(resource_group).workspaces.get, name)

    def get_id(self, name: str, resource_group: str) -> str:
        return self.ml_client_factory(resource_group).workspaces.get(name).id

    def create(
        self,
        name: str,
        resource_group: str,
        region: str,
        *,
        storage_account: str,
        key_vault: str,
        application_insights: str,
    ) -> str:
        workspace = Workspace(
            name=name,
            location=region,
            storage_account=storage_account,
            key_vault=key_vault,
            application_insights=application_insights,
        )
        ml_client = self.ml_client_factory(resource_group)
        created = _provider_call(
            f"Creating workspace {name}",
            lambda: ml_client.workspaces.begin_create(workspace).result(),
        )
        return created.id

    def delete(self, name: str, resource_group: str) -> None:
        # Dependents are removed one by one by the teardown.
        ml_client = self.ml_client_factory(resource_group)
        _provider_call(
            f"Deleting workspace {name}",
            lambda: ml_client.workspaces.begin_delete(name, delete_dependent_resources=False).result(),
        )

    def list(self, resource_group: str) -> list:
        return list(self.ml_client_factory(resource_group).workspaces.list())
