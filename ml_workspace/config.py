# ============================================================
# SHARED CONFIGURATION
# ============================================================
import logging
import os
import warnings

# Region used when neither --region nor AZURE_LOCATION is given
DEFAULT_LOCATION = "canadacentral"

# Dependent resource defaults (values only; created when missing)
STORAGE_SKU = "Standard_LRS"
STORAGE_KIND = "StorageV2"
KEYVAULT_SKU = "standard"
APPINSIGHTS_KIND = "web"

# Soft-deleted vault reclaim budget: 12 x 10s
RECLAIM_MAX_ATTEMPTS = 12
RECLAIM_DELAY_SECONDS = 10.0

# Exact token the user must type before the resource group is deleted
CONFIRMATION_TOKEN = "YES"

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
NOISY_LOGGERS = ("azure", "azure.core.pipeline.policies.http_logging_policy", "msal", "urllib3")


def configure_runtime(verbose: bool = False) -> None:
    """One-time process setup: logging and SDK warning suppression.

    Call from an entry point before any Azure client is built. Nothing else in
    the package looks at warning filters or logging handlers.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)

    if os.environ.get("ML_WORKSPACE_SHOW_WARNINGS", "").lower() in ("1", "true", "yes"):
        return
    warnings.filterwarnings("ignore", category=FutureWarning)
    warnings.filterwarnings("ignore", category=DeprecationWarning)
    # azure-ai-ml flags preview features with its own warning classes
    warnings.filterwarnings("ignore", module=r"azure\.ai\.ml.*")
