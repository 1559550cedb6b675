from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pathlib import Path
from typing import List, Optional
from .models import ExporterConfig
from ..exceptions import ConfigurationError

class ConfigManager:
    """Loads and validates the exporter configuration"""

    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = Path(config_dir)

    def load_exporter_config(self, name: str = "config", overrides: Optional[List[str]] = None) -> DictConfig:
        """Loads conf/<name>.yaml, applies dotlist overrides and validates the result"""
        config_path = self.config_dir / f"{name}.yaml"

        if not config_path.exists():
            raise ConfigurationError(f"Config not found: {config_path}")

        raw = OmegaConf.load(config_path)
        if overrides:
            raw = OmegaConf.merge(raw, OmegaConf.from_dotlist(overrides))

        if 'exporter' not in raw:
            raise ConfigurationError("Missing required config key: exporter")

        return self.validate(raw.exporter)

    @staticmethod
    def validate(exporter_cfg) -> DictConfig:
        """Merges onto the structured schema and checks value ranges"""
        try:
            cfg = OmegaConf.merge(OmegaConf.structured(ExporterConfig), exporter_cfg)
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid exporter config: {e}") from e

        roads = list(cfg.roads)
        if not roads:
            raise ConfigurationError("At least one road must be configured")
        if len(set(roads)) != len(roads):
            raise ConfigurationError(f"Duplicate road names in config: {roads}")

        for key in ('entry_rate', 'exit_rate', 'capacity'):
            if cfg.defaults[key] < 1:
                raise ConfigurationError(f"defaults.{key} must be >= 1")
        if cfg.defaults.min_delay_ms < 0:
            raise ConfigurationError("defaults.min_delay_ms must be >= 0")
        if cfg.simulator.entry_workers < 1 or cfg.simulator.exit_workers < 1:
            raise ConfigurationError("simulator worker counts must be >= 1")
        if cfg.backfill.step_minutes < 1 or cfg.backfill.window_minutes < cfg.backfill.step_minutes:
            raise ConfigurationError("backfill window must hold at least one step")

        return cfg
