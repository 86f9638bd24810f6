from pathlib import Path

import pytest

from localdash.config import DEFAULT_HTTP_PORT, Config
from localdash.dashboard import Dashboard

_VARS = (
    "LOCALDASH_SERVICES",
    "LOCALDASH_HOST",
    "LOCALDASH_PORT",
    "LOCALDASH_SETTLE_DELAY",
    "LOCALDASH_STOP_CONFIRM_DELAY",
    "LOCALDASH_PROBE_TIMEOUT",
    "LOCALDASH_EDITOR",
    "LOCALDASH_FILE_BROWSER",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "missing.env"


def test_defaults(clean_env):
    config = Config.from_env(clean_env)
    assert config.services_path == Path("services.json")
    assert config.host == "127.0.0.1"
    assert config.port == DEFAULT_HTTP_PORT
    assert config.settle_delay == 2.0
    assert config.stop_confirm_delay == 0.5
    assert config.probe_timeout == 5.0
    assert config.editor_command == "code"
    assert config.file_browser_command in ("open", "xdg-open")


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("LOCALDASH_SERVICES", "/etc/dash/services.json")
    monkeypatch.setenv("LOCALDASH_PORT", "8000")
    monkeypatch.setenv("LOCALDASH_SETTLE_DELAY", "0.25")
    monkeypatch.setenv("LOCALDASH_EDITOR", "cursor")
    monkeypatch.setenv("LOCALDASH_FILE_BROWSER", "nautilus")

    config = Config.from_env(clean_env)
    assert config.services_path == Path("/etc/dash/services.json")
    assert config.port == 8000
    assert config.settle_delay == 0.25
    assert config.editor_command == "cursor"
    assert config.file_browser_command == "nautilus"


def test_dotenv_file_is_loaded(clean_env, monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("LOCALDASH_PORT=7777\nLOCALDASH_PROBE_TIMEOUT=1.5\n")
    config = Config.from_env(env_file)
    # load_dotenv writes into os.environ; let monkeypatch restore it
    monkeypatch.delenv("LOCALDASH_PORT")
    monkeypatch.delenv("LOCALDASH_PROBE_TIMEOUT")
    assert config.port == 7777
    assert config.probe_timeout == 1.5


@pytest.mark.parametrize("name,value", [("LOCALDASH_PORT", "eighty"), ("LOCALDASH_SETTLE_DELAY", "soon")])
def test_malformed_numbers_name_the_variable(clean_env, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        Config.from_env(clean_env)


def test_dashboard_wiring(tmp_path):
    config = Config(services_path=tmp_path / "s.json", settle_delay=0.1, probe_timeout=1.0)
    dashboard = Dashboard.from_config(config)
    assert dashboard.registry.path == tmp_path / "s.json"
    assert dashboard.prober.timeout == 1.0
    assert dashboard.lifecycle.settle_delay == 0.1
    assert dashboard.lifecycle.registry is dashboard.registry
    assert dashboard.status.prober is dashboard.prober
