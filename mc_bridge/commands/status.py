"""Status command - report bridge configuration and health."""

import logging

from ..core.config import BridgeConfig
from .common import print_json, run_with_service


class StatusCommand:
    """Command for inspecting the bridge."""

    def __init__(self, config: BridgeConfig, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def run(self, health: bool = False) -> bool:
        if health:
            report = run_with_service(self.config, lambda service: service.health())
            print_json(report)
            return report["status"] != "unhealthy"

        async def _status(service):
            return service.status()

        status = run_with_service(self.config, _status)
        if self.verbose:
            status["config"] = self.config.redacted()
        print_json(status)
        return bool(status["configured"])
