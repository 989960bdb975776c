import unittest
from unittest.mock import MagicMock

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from ml_workspace.errors import ProviderOperationError
from ml_workspace.resources import (
    RegistryApi,
    ResourceGroupApi,
    StorageApi,
    TelemetryApi,
    VaultApi,
    WorkspaceApi,
)


class TestResourceGroupApi(unittest.TestCase):
    def test_delete_does_not_wait(self):
        client = MagicMock()
        api = ResourceGroupApi(client)

        poller = api.delete("demo-rg")

        client.resource_groups.begin_delete.assert_called_once_with("demo-rg")
        poller.result.assert_not_called()

    def test_create_failure_becomes_provider_error(self):
        client = MagicMock()
        client.resource_groups.create_or_update.side_effect = HttpResponseError("quota exceeded")

        with self.assertRaises(ProviderOperationError) as raised:
            ResourceGroupApi(client).create("demo-rg", "eastus")

        self.assertIn("quota exceeded", str(raised.exception))
        self.assertIsInstance(raised.exception.__cause__, HttpResponseError)


class TestStorageApi(unittest.TestCase):
    def test_exists_false_on_not_found(self):
        client = MagicMock()
        client.storage_accounts.get_properties.side_effect = ResourceNotFoundError("missing")

        self.assertFalse(StorageApi(client).exists("demostorage", "demo-rg"))

    def test_exists_propagates_other_errors(self):
        client = MagicMock()
        client.storage_accounts.get_properties.side_effect = HttpResponseError("forbidden")

        with self.assertRaises(HttpResponseError):
            StorageApi(client).exists("demostorage", "demo-rg")

    def test_create_waits_for_account(self):
        client = MagicMock()
        client.storage_accounts.begin_create.return_value.result.return_value.id = "storage-id"

        self.assertEqual(StorageApi(client).create("demostorage", "demo-rg", "eastus"), "storage-id")
        resource_group, name, params = client.storage_accounts.begin_create.call_args.args
        self.assertEqual((resource_group, name), ("demo-rg", "demostorage"))
        self.assertEqual(params["location"], "eastus")
        self.assertEqual(params["sku"], {"name": "Standard_LRS"})


class TestTelemetryApi(unittest.TestCase):
    def test_create_web_component(self):
        client = MagicMock()
        client.components.create_or_update.return_value.id = "insights-id"

        self.assertEqual(TelemetryApi(client).create("demo-insights", "demo-rg", "eastus"), "insights-id")
        params = client.components.create_or_update.call_args.args[2]
        self.assertEqual(params["kind"], "web")


class TestVaultApi(unittest.TestCase):
    def test_soft_deleted_lookup_is_scoped_to_region(self):
        client = MagicMock()
        api = VaultApi(client, tenant_id="tenant")

        self.assertTrue(api.exists_soft_deleted("demo-kv", "eastus"))
        client.vaults.get_deleted.assert_called_once_with(vault_name="demo-kv", location="eastus")

        client.vaults.get_deleted.side_effect = ResourceNotFoundError("gone")
        self.assertFalse(api.exists_soft_deleted("demo-kv", "eastus"))

    def test_purge_is_fire_and_forget(self):
        client = MagicMock()

        poller = VaultApi(client, tenant_id="tenant").purge_soft_deleted("demo-kv", "eastus")

        client.vaults.begin_purge_deleted_vault.assert_called_once_with(vault_name="demo-kv", location="eastus")
        poller.result.assert_not_called()

    def test_create_uses_session_tenant(self):
        client = MagicMock()
        client.vaults.begin_create_or_update.return_value.result.return_value.id = "vault-id"

        self.assertEqual(VaultApi(client, tenant_id="tenant").create("demo-kv", "demo-rg", "eastus"), "vault-id")
        params = client.vaults.begin_create_or_update.call_args.args[2]
        self.assertEqual(params["properties"]["tenant_id"], "tenant")
        self.assertTrue(params["properties"]["enable_soft_delete"])


class TestRegistryApi(unittest.TestCase):
    def test_delete_failure_becomes_provider_error(self):
        client = MagicMock()
        client.registries.begin_delete.side_effect = HttpResponseError("locked")

        with self.assertRaises(ProviderOperationError):
            RegistryApi(client).delete("demoacr", "demo-rg")


class TestWorkspaceApi(unittest.TestCase):
    def setUp(self):
        self.ml_client = MagicMock()
        self.factory = MagicMock(return_value=self.ml_client)
        self.api = WorkspaceApi(self.factory)

    def test_exists_uses_resource_group_client(self):
        self.ml_client.workspaces.get.side_effect = ResourceNotFoundError("missing")

        self.assertFalse(self.api.exists("demo", "demo-rg"))
        self.factory.assert_called_with("demo-rg")

    def test_create_passes_dependents(self):
        self.ml_client.workspaces.begin_create.return_value.result.return_value.id = "workspace-id"

        workspace_id = self.api.create(
            "demo",
            "demo-rg",
            "eastus",
            storage_account="storage-id",
            key_vault="vault-id",
            application_insights="insights-id",
        )

        self.assertEqual(workspace_id, "workspace-id")
        workspace = self.ml_client.workspaces.begin_create.call_args.args[0]
        self.assertEqual(workspace.name, "demo")
        self.assertEqual(workspace.storage_account, "storage-id")
        self.assertEqual(workspace.key_vault, "vault-id")
        self.assertEqual(workspace.application_insights, "insights-id")

    def test_delete_keeps_dependents(self):
        self.api.delete("demo", "demo-rg")

        self.ml_client.workspaces.begin_delete.assert_called_once_with("demo", delete_dependent_resources=False)


if __name__ == "__main__":
    unittest.main()
