# ============================================================
# AZURE SESSION (authentication + management clients)
# ============================================================
import logging
import os
import re
from functools import cached_property, lru_cache
from pathlib import Path

from azure.ai.ml import MLClient
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential, InteractiveBrowserCredential, TokenCachePersistenceOptions
from azure.mgmt.applicationinsights import ApplicationInsightsManagementClient
from azure.mgmt.containerregistry import ContainerRegistryManagementClient
from azure.mgmt.keyvault import KeyVaultManagementClient
from azure.mgmt.resource import ResourceManagementClient, SubscriptionClient
from azure.mgmt.storage import StorageManagementClient

from .errors import AuthError
from .resources import (
    RegistryApi,
    ResourceGroupApi,
    StorageApi,
    TelemetryApi,
    VaultApi,
    WorkspaceApi,
)

logger = logging.getLogger(__name__)

TENANT_REGEX = re.compile(r"sts\.windows\.net/([0-9a-fA-F-]{36})/")
_TENANT_BY_SUBSCRIPTION: dict[str, str] = {}
TENANT_ID_FILE = Path(".azure_tenant_id")


@lru_cache(maxsize=1)
def _get_default_tenant_id() -> str | None:
    env_tenant = os.environ.get("AZURE_TENANT_ID")
    if env_tenant:
        return env_tenant
    try:
        tenant = TENANT_ID_FILE.read_text(encoding="utf-8").strip()
        return tenant or None
    except OSError:
        return None


def _save_tenant_id(tenant_id: str) -> None:
    try:
        TENANT_ID_FILE.write_text(str(tenant_id).strip(), encoding="utf-8")
    except OSError as error:
        logger.debug(f"Could not cache tenant id in {TENANT_ID_FILE}: {error}")


def _use_default_credential() -> bool:
    return os.environ.get("AZURE_USE_DEFAULT_CREDENTIAL", "").lower() in ("1", "true", "yes")


@lru_cache(maxsize=64)
def _create_credential(tenant_id: str | None):
    if _use_default_credential():
        return DefaultAzureCredential()

    login_timeout = int(os.environ.get("AZURE_LOGIN_TIMEOUT_SECONDS", "1200"))
    cache_options = TokenCachePersistenceOptions(
        name="ml-workspace-lifecycle-cache",
        allow_unencrypted_storage=True,
    )

    if tenant_id:
        return InteractiveBrowserCredential(
            tenant_id=tenant_id,
            additionally_allowed_tenants=["*"],
            timeout=login_timeout,
            cache_persistence_options=cache_options,
        )
    return InteractiveBrowserCredential(
        additionally_allowed_tenants=["*"],
        timeout=login_timeout,
        cache_persistence_options=cache_options,
    )


def _extract_expected_tenant_id(error: Exception) -> str | None:
    matches = TENANT_REGEX.findall(str(error))
    if not matches:
        return None
    return matches[-1]


def get_credential(subscription_id: str | None = None):
    """
    Return shared cached credential so login happens once.
    Uses tenant discovered from previous tenant-mismatch errors for this subscription.
    """
    tenant_id = _get_default_tenant_id()
    if not tenant_id and subscription_id:
        tenant_id = _TENANT_BY_SUBSCRIPTION.get(subscription_id)
    return _create_credential(tenant_id)


def resolve_subscription_id(subscription_id: str | None) -> str:
    if subscription_id:
        return subscription_id

    env_subscription_id = os.environ.get("AZURE_SUBSCRIPTION_ID")
    if env_subscription_id:
        return env_subscription_id

    raise AuthError("Set AZURE_SUBSCRIPTION_ID in your environment or pass --subscription-id.")


def run_with_tenant_retry(subscription_id: str, operation):
    """
    Run an Azure SDK operation and retry once with tenant from error message if needed.
    """
    credential = get_credential(subscription_id)
    try:
        return operation(credential)
    except Exception as error:
        tenant_id = _extract_expected_tenant_id(error)
        if not tenant_id:
            raise
        logger.info(f"Subscription {subscription_id} belongs to tenant {tenant_id}; retrying login")
        _TENANT_BY_SUBSCRIPTION[subscription_id] = tenant_id
        _save_tenant_id(tenant_id)
        return operation(get_credential(subscription_id))


class Session:
    """Authenticated handle for one subscription with lazily built resource APIs."""

    def __init__(self, credential, subscription_id: str, tenant_id: str):
        self.credential = credential
        self.subscription_id = subscription_id
        self.tenant_id = tenant_id

    def ml_client(self, resource_group: str) -> MLClient:
        return MLClient(
            credential=self.credential,
            subscription_id=self.subscription_id,
            resource_group_name=resource_group,
        )

    @cached_property
    def resource_groups(self) -> ResourceGroupApi:
        return ResourceGroupApi(ResourceManagementClient(self.credential, self.subscription_id))

    @cached_property
    def storage(self) -> StorageApi:
        return StorageApi(StorageManagementClient(self.credential, self.subscription_id))

    @cached_property
    def telemetry(self) -> TelemetryApi:
        return TelemetryApi(ApplicationInsightsManagementClient(self.credential, self.subscription_id))

    @cached_property
    def vaults(self) -> VaultApi:
        return VaultApi(KeyVaultManagementClient(self.credential, self.subscription_id), self.tenant_id)

    @cached_property
    def registries(self) -> RegistryApi:
        return RegistryApi(ContainerRegistryManagementClient(self.credential, self.subscription_id))

    @cached_property
    def workspaces(self) -> WorkspaceApi:
        return WorkspaceApi(self.ml_client)


def authenticate(subscription_id: str | None = None) -> Session:
    """
    Log in and confirm the credential can read the subscription.

    Subscription comes from:
    - function argument, then
    - AZURE_SUBSCRIPTION_ID

    Raises AuthError when no usable credential is available.
    """
    resolved_subscription_id = resolve_subscription_id(subscription_id)

    def _fetch(credential):
        subscription = SubscriptionClient(credential).subscriptions.get(resolved_subscription_id)
        return credential, subscription

    try:
        credential, subscription = run_with_tenant_retry(resolved_subscription_id, _fetch)
    except ClientAuthenticationError as error:
        raise AuthError(
            f"Could not authenticate for subscription {resolved_subscription_id}: {error}"
        ) from error

    logger.info(f"Authenticated for subscription {subscription.display_name or resolved_subscription_id}")
    return Session(credential, resolved_subscription_id, subscription.tenant_id)
