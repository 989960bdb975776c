# ============================================================
# SOFT-DELETED KEY VAULT RECLAIM
# ============================================================
"""
Reclaim a key vault name that is held by a soft-deleted vault.

Azure keeps deleted vault names reserved per region until they are purged or
the retention period ends. The purge call returns before the name is free, so
the name is polled until neither an active nor a soft-deleted vault holds it.
"""
import logging
import time

from .config import RECLAIM_DELAY_SECONDS, RECLAIM_MAX_ATTEMPTS
from .errors import NameLockedError
from .models import ReclamationAttempt, VaultProbe

logger = logging.getLogger(__name__)


def poll_until(probe, max_attempts: int, delay_seconds: float, predicate, sleep=time.sleep, on_attempt=None):
    """
    Call ``probe`` until ``predicate(result)`` holds or the attempts run out.

    Returns ``(True, result)`` on the first satisfying result without using
    the remaining attempts, or ``(False, last_result)`` after exactly
    ``max_attempts`` probes. Sleeps between attempts only.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    result = None
    for attempt_number in range(1, max_attempts + 1):
        attempt = ReclamationAttempt(attempt_number, max_attempts, delay_seconds)
        result = probe()
        if on_attempt is not None:
            on_attempt(attempt, result)
        if predicate(result):
            return True, result
        if not attempt.is_last:
            sleep(delay_seconds)
    return False, result


def probe(vaults, name: str, resource_group: str, region: str) -> VaultProbe:
    return VaultProbe(
        exists_active=vaults.exists(name, resource_group),
        exists_deleted=vaults.exists_soft_deleted(name, region),
    )


def wait_for_availability(
    vaults,
    name: str,
    resource_group: str,
    region: str,
    max_attempts: int = RECLAIM_MAX_ATTEMPTS,
    delay_seconds: float = RECLAIM_DELAY_SECONDS,
    sleep=time.sleep,
) -> bool:
    """Poll until the vault name is free. Returns False on exhaustion, never raises for it."""

    def _log_attempt(attempt: ReclamationAttempt, observed: VaultProbe) -> None:
        logger.info(
            f"Waiting for key vault name {name} "
            f"(attempt {attempt.attempt_number}/{attempt.max_attempts}): {observed.state.value}"
        )

    available, _ = poll_until(
        lambda: probe(vaults, name, resource_group, region),
        max_attempts=max_attempts,
        delay_seconds=delay_seconds,
        predicate=lambda observed: observed.available,
        sleep=sleep,
        on_attempt=_log_attempt,
    )
    return available


def reclaim_vault_name(
    vaults,
    name: str,
    resource_group: str,
    region: str,
    max_attempts: int = RECLAIM_MAX_ATTEMPTS,
    delay_seconds: float = RECLAIM_DELAY_SECONDS,
    sleep=time.sleep,
) -> bool:
    """
    Purge a soft-deleted vault holding ``name`` and wait for the name to free up.

    Returns True if a purge was issued, False if nothing was soft-deleted.
    Raises NameLockedError when the name is still held after the budget.
    """
    if not vaults.exists_soft_deleted(name, region):
        return False

    logger.warning(f"Key vault {name} is soft-deleted in {region}; purging it permanently")
    vaults.purge_soft_deleted(name, region)

    if not wait_for_availability(
        vaults,
        name,
        resource_group,
        region,
        max_attempts=max_attempts,
        delay_seconds=delay_seconds,
        sleep=sleep,
    ):
        logger.error(f"Key vault name {name} still unavailable after {max_attempts} attempts")
        raise NameLockedError(name, max_attempts, region)

    logger.info(f"Key vault name {name} is available again")
    return True
