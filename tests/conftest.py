#!/usr/bin/env python3
"""
Global pytest configuration and fixtures.

This module provides:
- A manual clock for dedup window tests (see tests/helpers.py)
- In-memory local and fake remote stores
- Engine and service factories wired to those stores
"""

import os
import sys
from typing import Callable

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mc_bridge.bridge.dedup import DedupGuard
from mc_bridge.bridge.engine import SyncEngine
from mc_bridge.bridge.service import BridgeService
from mc_bridge.core.config import BridgeConfig
from mc_bridge.events import EventBroadcaster
from mc_bridge.stores.local import LocalTaskStore
from tests.fake_remote_store import FakeRemoteStore
from tests.helpers import EPOCH_WATERMARK, ManualClock


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: exercises the bridge end to end")
    config.addinivalue_line("markers", "unit: isolated unit test")


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(
        supabase_url="https://crm.example.supabase.co",
        supabase_key="service-key",
        agency_id="apprapid",
    )


@pytest.fixture
def unconfigured_config() -> BridgeConfig:
    return BridgeConfig(supabase_url=None, supabase_key=None)


@pytest.fixture
def broadcaster() -> EventBroadcaster:
    return EventBroadcaster()


@pytest.fixture
def local_store(broadcaster):
    store = LocalTaskStore(":memory:", broadcaster=broadcaster)
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def dedup(clock) -> DedupGuard:
    return DedupGuard(window=30.0, sweep_interval=60.0, clock=clock)


@pytest.fixture
def engine(config, local_store, remote, dedup) -> SyncEngine:
    return SyncEngine(config, local_store, remote, dedup)


@pytest.fixture
def make_service(config, local_store, remote, clock, broadcaster) -> Callable[..., BridgeService]:
    """Build a service attached to the shared broadcaster."""

    def _make(cfg: BridgeConfig = None, attach: bool = True) -> BridgeService:
        cfg = cfg or config
        service = BridgeService(
            cfg,
            local_store,
            remote_store=remote if cfg.is_configured else None,
            clock=clock,
        )
        service.poller.watermark = EPOCH_WATERMARK
        if attach:
            service.attach(broadcaster)
        return service

    return _make
