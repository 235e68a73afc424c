"""Tests for configuration loading and environment overrides."""

import json

from mc_bridge.core.config import BridgeConfig, get_default_config_path, load_config, save_config


def test_defaults_are_unconfigured():
    config = BridgeConfig()
    assert not config.is_configured
    assert config.agency_id == "apprapid"
    assert config.poll_interval == 30.0
    assert config.dedup_window == 30.0


def test_placeholder_key_counts_as_unconfigured():
    config = BridgeConfig(supabase_url="https://x.supabase.co", supabase_key="<your-service-key>")
    assert not config.is_configured


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "config.json"
    save_config(BridgeConfig(supabase_url="https://file.supabase.co", supabase_key="file-key"), str(path))

    config = load_config(str(path), environ={
        "BRIDGE_SUPABASE_URL": "https://env.supabase.co",
        "BRIDGE_SUPABASE_SERVICE_KEY": "env-key",
        "MC_DATABASE_PATH": "/tmp/mc.db",
    })

    assert config.supabase_url == "https://env.supabase.co"
    assert config.supabase_key == "env-key"
    assert config.db_path == "/tmp/mc.db"
    assert config.is_configured


def test_empty_environment_values_do_not_override():
    config = BridgeConfig(supabase_url="https://file.supabase.co").apply_env({"BRIDGE_SUPABASE_URL": ""})
    assert config.supabase_url == "https://file.supabase.co"


def test_file_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    original = BridgeConfig(
        supabase_url="https://crm.supabase.co",
        supabase_key="k",
        agency_id="acme",
        poll_interval=5,
        dedup_window=10,
        push_workers=4,
    )

    save_config(original, str(path))
    loaded = load_config(str(path), environ={})

    assert loaded == BridgeConfig.from_dict(original.to_dict())
    assert loaded.agency_id == "acme"
    assert loaded.poll_interval == 5.0
    assert loaded.push_workers == 4
    assert json.loads(path.read_text())["supabase"]["url"] == "https://crm.supabase.co"


def test_missing_or_invalid_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "absent.json"), environ={}) == BridgeConfig()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert load_config(str(broken), environ={}) == BridgeConfig()


def test_default_path_honors_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("MC_BRIDGE_CONFIG", str(tmp_path / "custom.json"))
    assert get_default_config_path() == tmp_path / "custom.json"

    monkeypatch.delenv("MC_BRIDGE_CONFIG")
    assert get_default_config_path().parts[-2:] == ("mc-bridge", "config.json")


def test_redacted_hides_key():
    data = BridgeConfig(supabase_url="https://x", supabase_key="secret").redacted()
    assert data["supabase_key"] == "***"
    assert data["supabase_url"] == "https://x"
