"""Tests for the mc-bridge command line."""

import json

import pytest

from mc_bridge.core.config import load_config
from mc_bridge.main import main


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("BRIDGE_SUPABASE_URL", "BRIDGE_SUPABASE_SERVICE_KEY", "MC_DATABASE_PATH", "MC_BRIDGE_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def paths(tmp_path):
    return str(tmp_path / "config.json"), str(tmp_path / "mc.db")


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_status_when_unconfigured(paths, capsys):
    config_path, db_path = paths

    assert main(["--config", config_path, "--db", db_path, "status"]) == 1

    status = json.loads(capsys.readouterr().out)
    assert status["configured"] is False
    assert status["active"] is False


def test_health_when_unconfigured(paths, capsys):
    config_path, db_path = paths

    assert main(["--config", config_path, "--db", db_path, "status", "--health"]) == 1

    report = json.loads(capsys.readouterr().out)
    assert report["status"] == "unhealthy"


def test_poll_when_unconfigured(paths, capsys):
    config_path, db_path = paths

    assert main(["--config", config_path, "--db", db_path, "poll"]) == 1
    assert "not configured" in capsys.readouterr().out


def test_push_when_unconfigured(paths, capsys):
    config_path, db_path = paths

    assert main(["--config", config_path, "--db", db_path, "push", "mc-1"]) == 1
    assert json.loads(capsys.readouterr().out)["error"] == "Bridge not configured"


def test_configure_writes_file(paths):
    config_path, _ = paths

    code = main([
        "--config", config_path, "configure",
        "--url", "https://crm.supabase.co",
        "--key", "service-key",
        "--agency-id", "acme",
        "--poll-interval", "15",
    ])

    assert code == 0
    config = load_config(config_path, environ={})
    assert config.is_configured
    assert config.agency_id == "acme"
    assert config.poll_interval == 15.0


def test_configure_rejects_non_positive_interval(paths):
    config_path, _ = paths
    assert main(["--config", config_path, "configure", "--poll-interval", "0"]) == 1


def test_configure_does_not_persist_environment_secrets(paths, monkeypatch):
    config_path, _ = paths
    main(["--config", config_path, "configure", "--url", "https://file.supabase.co"])
    monkeypatch.setenv("BRIDGE_SUPABASE_SERVICE_KEY", "env-only-secret")
    monkeypatch.setenv("BRIDGE_SUPABASE_URL", "https://env.supabase.co")

    assert main(["--config", config_path, "configure", "--agency-id", "acme"]) == 0

    with open(config_path, encoding="utf-8") as handle:
        saved = json.load(handle)
    assert saved["supabase"]["service_key"] is None
    assert saved["supabase"]["url"] == "https://file.supabase.co"
    assert saved["agency_id"] == "acme"
