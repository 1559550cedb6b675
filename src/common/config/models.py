from dataclasses import dataclass, field
from typing import List, Optional

@dataclass
class RoadDefaultsConfig:
    entry_rate: int = 1
    exit_rate: int = 1
    capacity: int = 100
    min_delay_ms: int = 500

@dataclass
class SimulatorConfig:
    entry_workers: int = 5
    exit_workers: int = 3
    seed: Optional[int] = None
    autostart: bool = True

@dataclass
class BackfillConfig:
    head_margin_minutes: int = 1
    window_minutes: int = 55
    step_minutes: int = 5
    seed: Optional[int] = None

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080

@dataclass
class LoggingConfig:
    level: str = "INFO"

@dataclass
class ExporterConfig:
    roads: List[str] = field(default_factory=lambda: ["road-1", "road-6", "Ayalon", "road-90", "road-431"])
    defaults: RoadDefaultsConfig = field(default_factory=RoadDefaultsConfig)
    simulator: SimulatorConfig = field(default_factory=SimulatorConfig)
    backfill: BackfillConfig = field(default_factory=BackfillConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
