"""Local and remote task stores."""

from .local import LocalTaskStore
from .remote import RemoteTaskStore

__all__ = ['LocalTaskStore', 'RemoteTaskStore']
