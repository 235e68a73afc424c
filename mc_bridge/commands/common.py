"""Shared helpers for the command implementations."""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, TypeVar

from ..bridge.service import BridgeService
from ..core.config import BridgeConfig
from ..stores.local import LocalTaskStore


T = TypeVar("T")


def run_with_service(config: BridgeConfig, action: Callable[[BridgeService], Awaitable[T]]) -> T:
    """Open the stores, run ``action`` on a fresh service and tear it down."""

    async def _main() -> T:
        store = LocalTaskStore(config.db_path)
        service = BridgeService(config, store)
        try:
            return await action(service)
        finally:
            await service.shutdown()
            store.close()

    return asyncio.run(_main())


def print_json(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))
