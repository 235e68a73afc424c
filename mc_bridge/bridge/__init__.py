"""Bidirectional MC ↔ CRM task synchronization bridge."""

from .mapping import (
    local_status_to_remote,
    remote_status_to_local,
    local_priority_to_remote,
    remote_priority_to_local,
    agent_name_to_remote,
    remote_agent_to_name,
)
from .dedup import DedupGuard, dedup_key, PUSH_DIRECTION, PULL_DIRECTION
from .correlation import CorrelationResolver, Correlation
from .engine import SyncEngine
from .poller import RemotePoller
from .listener import BridgeEventListener
from .service import BridgeService

__all__ = [
    'local_status_to_remote',
    'remote_status_to_local',
    'local_priority_to_remote',
    'remote_priority_to_local',
    'agent_name_to_remote',
    'remote_agent_to_name',
    'DedupGuard',
    'dedup_key',
    'PUSH_DIRECTION',
    'PULL_DIRECTION',
    'CorrelationResolver',
    'Correlation',
    'SyncEngine',
    'RemotePoller',
    'BridgeEventListener',
    'BridgeService',
]
