"""Health report for the bridge admin surface."""

from typing import TYPE_CHECKING, Any, Dict
import logging

from ..core.exceptions import RemoteStoreError
from ..utils.date import utc_now_iso

if TYPE_CHECKING:
    from .service import BridgeService


logger = logging.getLogger(__name__)

OK = "ok"
WARN = "warn"
ERROR = "error"


def _check(status: str, detail: str) -> Dict[str, str]:
    return {"status": status, "detail": detail}


def overall_status(checks: Dict[str, Dict[str, str]]) -> str:
    """``unhealthy`` on any error, ``degraded`` on any warning."""
    statuses = {check["status"] for check in checks.values()}
    if ERROR in statuses:
        return "unhealthy"
    if WARN in statuses:
        return "degraded"
    return "healthy"


async def build_health_report(service: "BridgeService") -> Dict[str, Any]:
    checks: Dict[str, Dict[str, str]] = {}

    configured = service.configured
    checks["bridge_config"] = (
        _check(OK, "Supabase URL and service key configured")
        if configured
        else _check(ERROR, "BRIDGE_SUPABASE_URL or BRIDGE_SUPABASE_SERVICE_KEY missing")
    )

    if configured:
        try:
            count = await service.remote.count_tasks()
            checks["supabase"] = _check(OK, f"Connected - {count} tasks in CRM")
        except RemoteStoreError as e:
            logger.warning(f"Health check query failed: {e.message}")
            checks["supabase"] = _check(ERROR, f"Query failed: {e.message}")
    else:
        checks["supabase"] = _check(WARN, "Skipped - bridge not configured")

    poller = service.poller.status()
    checks["crm_poller"] = (
        _check(OK, f"Running - last poll: {poller['last_poll_time']}")
        if poller["running"]
        else _check(WARN, "Not running")
    )

    stats = service.engine.stats()
    checks["sync_engine"] = _check(OK, f"Dedup cache: {stats['recently_synced_count']} entries")

    return {
        "status": overall_status(checks),
        "checks": checks,
        "timestamp": utc_now_iso(),
    }
