"""Manual sync commands - trigger a poll or push a single task."""

import logging
from typing import Optional

from ..core.config import BridgeConfig
from .common import print_json, run_with_service


class PollCommand:
    """Run one CRM → MC poll cycle immediately."""

    def __init__(self, config: BridgeConfig, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def run(self, since: Optional[str] = None) -> bool:
        if not self.config.is_configured:
            print("Bridge not configured. Set BRIDGE_SUPABASE_URL and BRIDGE_SUPABASE_SERVICE_KEY.")
            return False

        async def _poll(service):
            if since:
                service.poller.watermark = since
            return await service.trigger_poll()

        stats = run_with_service(self.config, _poll)
        print_json({"success": stats.errors == 0, **stats.to_dict()})
        return stats.errors == 0


class PushCommand:
    """Push one MC task to the CRM."""

    def __init__(self, config: BridgeConfig, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def run(self, task_id: str) -> bool:
        result = run_with_service(self.config, lambda service: service.trigger_push(task_id))
        print_json(result.to_dict())
        return result.success
