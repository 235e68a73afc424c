"""
Core module for mc-bridge - contains domain models, configuration, and exceptions.
"""

from .models import (
    Agent,
    Task,
    RemoteTask,
    ChangeEvent,
    EventType,
    LocalStatus,
    RemoteStatus,
    LocalPriority,
    RemotePriority,
    SyncAction,
    SyncResult,
    PollStats,
    BRIDGE_SOURCE,
    DEFAULT_WORKSPACE,
)

from .config import BridgeConfig, load_config, save_config

from .exceptions import (
    BridgeError,
    ConfigurationError,
    RemoteStoreError,
    LocalStoreError,
)

__all__ = [
    # Models
    'Agent',
    'Task',
    'RemoteTask',
    'ChangeEvent',
    'EventType',
    'LocalStatus',
    'RemoteStatus',
    'LocalPriority',
    'RemotePriority',
    'SyncAction',
    'SyncResult',
    'PollStats',
    'BRIDGE_SOURCE',
    'DEFAULT_WORKSPACE',
    # Configuration
    'BridgeConfig',
    'load_config',
    'save_config',
    # Exceptions
    'BridgeError',
    'ConfigurationError',
    'RemoteStoreError',
    'LocalStoreError',
]
