import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.common.config import ConfigManager
from src.common.logging import setup_logger
from src.traffic.application.builder import TrafficApplicationBuilder
from src.traffic.presentation.api import app, init_service

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    exporter_cfg = ConfigManager.validate(cfg.exporter)
    logger = setup_logger("src", exporter_cfg.logging.level)
    logger.info("Configuration loaded.")

    service = TrafficApplicationBuilder(exporter_cfg).build_service()
    init_service(service, autostart=exporter_cfg.simulator.autostart)

    server_cfg = exporter_cfg.server
    logger.info(f"Metrics server running on http://{server_cfg.host}:{server_cfg.port}/metrics")
    logger.info(f"Roads: {', '.join(service.registry.names())}")

    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)

if __name__ == "__main__":
    main()
