"""Configure command - write remote credentials and bridge settings."""

import logging
from typing import Optional

from ..core.config import BridgeConfig, get_default_config_path, save_config


class ConfigureCommand:
    """Persist bridge settings to the configuration file."""

    def __init__(self, config: BridgeConfig, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def run(
        self,
        config_path: Optional[str] = None,
        url: Optional[str] = None,
        key: Optional[str] = None,
        agency_id: Optional[str] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        if config_path is None:
            config_path = str(get_default_config_path())

        # Start from the file alone; environment overrides stay out of it.
        saved = BridgeConfig.load_from_file(config_path)

        if url:
            saved.supabase_url = url
        if key:
            saved.supabase_key = key
        if agency_id:
            saved.agency_id = agency_id
        if poll_interval is not None:
            if poll_interval <= 0:
                print("Poll interval must be positive")
                return False
            saved.poll_interval = poll_interval

        save_config(saved, config_path)
        self.config = saved
        state = "configured" if saved.is_configured else "not configured (credentials missing)"
        print(f"Saved bridge settings - {state}")
        return True
