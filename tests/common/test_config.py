from pathlib import Path
import pytest
from src.common.config import ConfigManager
from src.common.exceptions import ConfigurationError

REPO_CONF = Path(__file__).resolve().parents[2] / "conf"

def write_config(tmp_path, body):
    (tmp_path / "config.yaml").write_text(body)
    return ConfigManager(tmp_path)

def test_repository_config_loads():
    cfg = ConfigManager(REPO_CONF).load_exporter_config()
    assert list(cfg.roads) == ["road-1", "road-6", "Ayalon", "road-90", "road-431"]
    assert cfg.simulator.entry_workers == 5
    assert cfg.simulator.exit_workers == 3
    assert cfg.defaults.min_delay_ms == 500
    assert cfg.backfill.window_minutes == 55
    assert cfg.server.port == 8080

def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path).load_exporter_config()

def test_missing_exporter_key(tmp_path):
    manager = write_config(tmp_path, "other: 1\n")
    with pytest.raises(ConfigurationError):
        manager.load_exporter_config()

def test_defaults_fill_missing_sections(tmp_path):
    manager = write_config(tmp_path, "exporter:\n  roads: [a, b]\n")
    cfg = manager.load_exporter_config()
    assert list(cfg.roads) == ["a", "b"]
    assert cfg.defaults.capacity == 100
    assert cfg.backfill.step_minutes == 5

def test_overrides(tmp_path):
    manager = write_config(tmp_path, "exporter:\n  roads: [a]\n")
    cfg = manager.load_exporter_config(overrides=["exporter.server.port=9000", "exporter.simulator.seed=4"])
    assert cfg.server.port == 9000
    assert cfg.simulator.seed == 4

@pytest.mark.parametrize("body", [
    "exporter:\n  roads: []\n",
    "exporter:\n  roads: [a, a]\n",
    "exporter:\n  defaults:\n    entry_rate: 0\n",
    "exporter:\n  defaults:\n    min_delay_ms: -1\n",
    "exporter:\n  simulator:\n    exit_workers: 0\n",
    "exporter:\n  backfill:\n    step_minutes: 0\n",
    "exporter:\n  server:\n    port: not-a-port\n",
])
def test_invalid_configs(tmp_path, body):
    manager = write_config(tmp_path, body)
    with pytest.raises(ConfigurationError):
        manager.load_exporter_config()
