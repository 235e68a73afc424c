"""
Exception classes for mc-bridge.
"""

from typing import Optional


class BridgeError(Exception):
    """Base exception for all mc-bridge errors."""
    pass


class ConfigurationError(BridgeError):
    """Raised when configuration is invalid or missing."""
    pass


class RemoteStoreError(BridgeError):
    """Raised when a request against the remote task store fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LocalStoreError(BridgeError):
    """Raised when the local task database rejects an operation."""
    pass

