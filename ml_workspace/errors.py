# ============================================================
# ERROR TYPES
# ============================================================


class WorkspaceLifecycleError(RuntimeError):
    """Base class for failures that should stop a provisioning or teardown run."""


class AuthError(WorkspaceLifecycleError):
    """Credentials are missing, invalid or expired for the subscription."""


class NameLockedError(WorkspaceLifecycleError):
    """A vault name is still active or soft-deleted after the reclaim budget."""

    def __init__(self, name: str, attempts: int, region: str):
        self.name = name
        self.attempts = attempts
        self.region = region
        super().__init__(
            f"Key vault name '{name}' is still unavailable in {region} after {attempts} attempts. "
            "The purge may still be running; retry later or pick another workspace name."
        )


class ProviderOperationError(WorkspaceLifecycleError):
    """A create or delete call was rejected by Azure (quota, permission, invalid config)."""
