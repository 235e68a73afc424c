"""
Configuration management for mc-bridge.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .models import DEFAULT_WORKSPACE


CONFIG_DIR_NAME = "mc-bridge"
CONFIG_FILE = "config.json"

ENV_SUPABASE_URL = "BRIDGE_SUPABASE_URL"
ENV_SUPABASE_KEY = "BRIDGE_SUPABASE_SERVICE_KEY"
ENV_DATABASE_PATH = "MC_DATABASE_PATH"
ENV_CONFIG_PATH = "MC_BRIDGE_CONFIG"


def _normalize_path(path: str) -> str:
    """Expand user and convert to absolute path."""
    return os.path.abspath(os.path.expanduser(path))


@dataclass
class BridgeConfig:
    """Settings for the MC ↔ CRM bridge."""

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    agency_id: str = "apprapid"
    poll_interval: float = 30.0
    poll_batch_size: int = 50
    dedup_window: float = 30.0
    dedup_sweep_interval: float = 60.0
    push_workers: int = 2
    default_workspace: str = DEFAULT_WORKSPACE
    request_timeout: float = 10.0
    db_path: str = "mission-control.db"

    @property
    def is_configured(self) -> bool:
        """True when remote credentials are present and not a placeholder."""
        url = (self.supabase_url or "").strip()
        key = (self.supabase_key or "").strip()
        return bool(url and key and not key.startswith("<"))

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        """Override file settings with environment variables, in place."""
        env = os.environ if environ is None else environ
        if env.get(ENV_SUPABASE_URL):
            self.supabase_url = env[ENV_SUPABASE_URL]
        if env.get(ENV_SUPABASE_KEY):
            self.supabase_key = env[ENV_SUPABASE_KEY]
        if env.get(ENV_DATABASE_PATH):
            self.db_path = env[ENV_DATABASE_PATH]
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeConfig":
        supabase = data.get("supabase", {})
        poller = data.get("poller", {})
        dedup = data.get("dedup", {})
        return cls(
            supabase_url=supabase.get("url", data.get("supabase_url")),
            supabase_key=supabase.get("service_key", data.get("supabase_key")),
            agency_id=data.get("agency_id", "apprapid"),
            poll_interval=float(poller.get("interval", 30.0)),
            poll_batch_size=int(poller.get("batch_size", 50)),
            dedup_window=float(dedup.get("window", 30.0)),
            dedup_sweep_interval=float(dedup.get("sweep_interval", 60.0)),
            push_workers=int(data.get("push_workers", 2)),
            default_workspace=data.get("default_workspace", DEFAULT_WORKSPACE),
            request_timeout=float(supabase.get("timeout", 10.0)),
            db_path=data.get("db_path", "mission-control.db"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "supabase": {
                "url": self.supabase_url,
                "service_key": self.supabase_key,
                "timeout": self.request_timeout,
            },
            "agency_id": self.agency_id,
            "poller": {
                "interval": self.poll_interval,
                "batch_size": self.poll_batch_size,
            },
            "dedup": {
                "window": self.dedup_window,
                "sweep_interval": self.dedup_sweep_interval,
            },
            "push_workers": self.push_workers,
            "default_workspace": self.default_workspace,
            "db_path": self.db_path,
        }

    @classmethod
    def load_from_file(cls, config_path: str) -> "BridgeConfig":
        config_path = _normalize_path(config_path)
        if not os.path.exists(config_path):
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError:
            return cls()

        return cls.from_dict(data)

    def save_to_file(self, config_path: str) -> None:
        config_path = _normalize_path(config_path)
        os.makedirs(os.path.dirname(config_path), exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2)

    def redacted(self) -> Dict[str, Any]:
        """Settings with the service key masked, for display."""
        data = asdict(self)
        if data.get("supabase_key"):
            data["supabase_key"] = "***"
        return data


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    override = os.environ.get(ENV_CONFIG_PATH)
    if override:
        return Path(_normalize_path(override))
    return Path.home() / ".config" / CONFIG_DIR_NAME / CONFIG_FILE


def load_config(config_path: Optional[str] = None,
                environ: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    """
    Load configuration from file, then apply environment overrides.

    Args:
        config_path: Optional path to config file. Uses default if not provided.
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        BridgeConfig object
    """
    if config_path is None:
        config_path = str(get_default_config_path())

    return BridgeConfig.load_from_file(config_path).apply_env(environ)


def save_config(config: BridgeConfig, config_path: Optional[str] = None):
    """
    Save configuration to file.

    Args:
        config: BridgeConfig object to save
        config_path: Optional path to save to. Uses default if not provided.
    """
    if config_path is None:
        config_path = str(get_default_config_path())

    config.save_to_file(config_path)
