"""
Health-check helpers for liveness and readiness probes.

Liveness:  is the process alive and not deadlocked?  (cheap, no I/O)
Readiness: can it serve traffic?  (every served database answers SELECT 1)
"""

import logging

from sqlgate.core.errors import DatabaseBusyError
from sqlgate.core.pool import DatabaseRegistry, health_check

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Individual dependency checks
# ---------------------------------------------------------------------------


def check_database(registry: DatabaseRegistry, name: str) -> bool:
    """SELECT 1 on ``name`` while holding its lock. Returns True if ok."""
    try:
        with registry.acquire(name) as handle:
            return health_check(handle.conn)
    except DatabaseBusyError:
        return False


# ---------------------------------------------------------------------------
# Composite probes
# ---------------------------------------------------------------------------


def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe: just confirms the Python process is responsive.
    No I/O.  Return format matches readiness_check for consistency.
    """
    return (True, [])


def readiness_check(registry: DatabaseRegistry) -> tuple[bool, list[str]]:
    """
    Check every served database.
    Returns (ok, names of failing databases).
    """
    failures = [name for name in registry.names() if not check_database(registry, name)]
    if failures:
        logger.warning("Readiness check failed for: %s", ", ".join(failures))
    return (len(failures) == 0, failures)
