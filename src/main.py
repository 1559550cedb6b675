import argparse
import sys
import os
from datetime import datetime, timezone

# Add project root to sys.path to allow imports from 'src'
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

def main(argv=None):
    """
    Main entry point for the road traffic exporter.

    serve     runs the simulation and the HTTP API
    backfill  writes one remote-write payload to a file for offline import
    """
    parser = argparse.ArgumentParser(description="Road Traffic Exporter")
    parser.add_argument('module', choices=['serve', 'backfill'], help="Module to run")
    parser.add_argument('--config-dir', default="conf", help="Directory holding config.yaml")
    parser.add_argument('--output', default="backfill.pb.snappy", help="Payload file written by 'backfill'")
    parser.add_argument('--now', default=None, help="ISO timestamp used as the current time by 'backfill'")

    args, unknown = parser.parse_known_args(argv)

    from src.common.config import ConfigManager
    from src.common.logging import setup_logger
    from src.traffic.application.builder import TrafficApplicationBuilder

    # Remaining arguments are dotlist overrides, e.g. exporter.server.port=9000
    cfg = ConfigManager(args.config_dir).load_exporter_config(overrides=unknown)
    logger = setup_logger("src", cfg.logging.level)
    logger.info(f"Starting module: {args.module}")

    service = TrafficApplicationBuilder(cfg).build_service()

    if args.module == 'serve':
        import uvicorn
        from src.traffic.presentation.api import app, init_service

        init_service(service, autostart=cfg.simulator.autostart)
        uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)
    elif args.module == 'backfill':
        now = datetime.fromisoformat(args.now.replace("Z", "+00:00")) if args.now else datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        payload = service.backfill_payload(now)
        with open(args.output, 'wb') as f:
            f.write(payload)
        logger.info(f"Wrote {len(payload)} bytes to {args.output}")

    return 0

if __name__ == "__main__":
    sys.exit(main())
