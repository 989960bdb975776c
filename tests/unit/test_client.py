import unittest
from unittest.mock import MagicMock, patch

from azure.core.exceptions import ClientAuthenticationError

from ml_workspace import client as client_module
from ml_workspace.client import Session, authenticate, resolve_subscription_id
from ml_workspace.errors import AuthError

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"
OTHER_TENANT = "11111111-2222-3333-4444-555555555555"


@patch("ml_workspace.client._get_default_tenant_id", return_value=None)
@patch("ml_workspace.client._create_credential")
@patch("ml_workspace.client.SubscriptionClient")
class TestAuthenticate(unittest.TestCase):
    def tearDown(self):
        client_module._TENANT_BY_SUBSCRIPTION.clear()

    def test_returns_session_with_tenant(self, mock_subscription_client, mock_create_credential, _):
        subscription = mock_subscription_client.return_value.subscriptions.get.return_value
        subscription.tenant_id = "tenant-id"

        session = authenticate(SUBSCRIPTION_ID)

        self.assertIsInstance(session, Session)
        self.assertEqual(session.subscription_id, SUBSCRIPTION_ID)
        self.assertEqual(session.tenant_id, "tenant-id")
        self.assertIs(session.credential, mock_create_credential.return_value)
        mock_subscription_client.return_value.subscriptions.get.assert_called_once_with(SUBSCRIPTION_ID)

    def test_invalid_credentials_raise_auth_error(self, mock_subscription_client, *_):
        mock_subscription_client.return_value.subscriptions.get.side_effect = ClientAuthenticationError(
            "token expired"
        )

        with self.assertRaises(AuthError):
            authenticate(SUBSCRIPTION_ID)

    @patch("ml_workspace.client._save_tenant_id")
    def test_retries_with_tenant_from_error(self, mock_save, mock_subscription_client, mock_create_credential, _):
        subscription = MagicMock(tenant_id=OTHER_TENANT)
        mock_subscription_client.return_value.subscriptions.get.side_effect = [
            RuntimeError(f"Token issuer must be https://sts.windows.net/{OTHER_TENANT}/"),
            subscription,
        ]

        session = authenticate(SUBSCRIPTION_ID)

        self.assertEqual(session.tenant_id, OTHER_TENANT)
        mock_save.assert_called_once_with(OTHER_TENANT)
        self.assertEqual(mock_create_credential.call_args_list[-1].args, (OTHER_TENANT,))

    def test_other_errors_propagate(self, mock_subscription_client, *_):
        mock_subscription_client.return_value.subscriptions.get.side_effect = RuntimeError("network down")

        with self.assertRaises(RuntimeError):
            authenticate(SUBSCRIPTION_ID)


class TestResolveSubscriptionId(unittest.TestCase):
    def test_argument_wins(self):
        with patch.dict("os.environ", {"AZURE_SUBSCRIPTION_ID": "from-env"}):
            self.assertEqual(resolve_subscription_id("from-arg"), "from-arg")

    def test_falls_back_to_environment(self):
        with patch.dict("os.environ", {"AZURE_SUBSCRIPTION_ID": "from-env"}):
            self.assertEqual(resolve_subscription_id(None), "from-env")

    def test_missing_everywhere(self):
        with patch.dict("os.environ", {}, clear=True):
            with self.assertRaises(AuthError):
                resolve_subscription_id(None)


class TestSession(unittest.TestCase):
    @patch("ml_workspace.client.KeyVaultManagementClient")
    def test_vault_api_is_built_once_with_tenant(self, mock_keyvault_client):
        session = Session(MagicMock(), SUBSCRIPTION_ID, "tenant-id")

        self.assertIs(session.vaults, session.vaults)
        self.assertEqual(session.vaults.tenant_id, "tenant-id")
        mock_keyvault_client.assert_called_once_with(session.credential, SUBSCRIPTION_ID)

    @patch("ml_workspace.client.MLClient")
    def test_ml_client_scoped_to_resource_group(self, mock_ml_client):
        session = Session(MagicMock(), SUBSCRIPTION_ID, "tenant-id")

        session.workspaces.exists("demo", "demo-rg")

        self.assertEqual(mock_ml_client.call_args.kwargs["resource_group_name"], "demo-rg")


if __name__ == "__main__":
    unittest.main()
