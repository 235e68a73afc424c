"""
Command implementations for mc-bridge.
"""

from .status import StatusCommand
from .sync import PollCommand, PushCommand
from .configure import ConfigureCommand

__all__ = [
    'StatusCommand',
    'PollCommand',
    'PushCommand',
    'ConfigureCommand',
]
