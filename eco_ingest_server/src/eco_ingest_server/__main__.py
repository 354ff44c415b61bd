"""
Canonical entry point for eco_ingest_server package.

Usage:
    eco-ingest --environment production server
    eco-ingest --environment development setup-db
"""

import argparse
import logging
import os
import sys

from eco_ingest_core.config.environments import Settings, get_settings
from pydantic import ValidationError

log = logging.getLogger(__name__)


def setup_logging(config: Settings) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    return None


def load_settings() -> Settings:
    """Load settings or exit: missing broker, database or weather addresses are fatal."""
    try:
        return get_settings()
    except ValidationError as exc:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s")
        missing = ", ".join(str(err["loc"][0]) for err in exc.errors())
        log.error("Invalid configuration, refusing to start: %s", missing)
        sys.exit(1)


def run_mqtt_server(args: argparse.Namespace) -> None:
    """Run the MQTT ingest server."""
    from eco_ingest_server.adapters.mqtt.server import main as mqtt_main

    config = load_settings()
    setup_logging(config)

    log.info("Starting MQTT ingest server...")
    log.info(f"Environment: {args.environment}")
    log.info(f"MQTT Broker: {config.MQTT_BROKER}:{config.MQTT_PORT}")
    log.info(f"Weather service: {config.CWA_API_SERVICE}")
    log.info(f"Workers: {config.WORKER_COUNT} (queue {config.WORKER_QUEUE_SIZE})")

    try:
        mqtt_main(config)
    except KeyboardInterrupt:
        log.info("Closing MQTT connection...")
    return None


def setup_database(args: argparse.Namespace) -> None:
    """Create the telemetry tables."""
    from sqlalchemy import create_engine

    from eco_ingest_server.adapters.db.sqlalchemy_models import Base

    config = load_settings()
    setup_logging(config)

    log.info(f"Setting up database for {args.environment} environment...")

    engine = create_engine(config.DATABASE_URL, future=True, echo=False)
    Base.metadata.create_all(bind=engine)
    log.info("Database setup completed successfully")
    return None


def main() -> None:
    """Main entry point for eco_ingest_server commands."""
    parser = argparse.ArgumentParser(
        description="Eco telemetry ingest - MQTT server and database management"
    )
    parser.add_argument(
        "--environment",
        choices=["production", "development", "testing"],
        default="development",
        help="Environment to run in",
    )
    parser.add_argument(
        "command",
        choices=["server", "setup-db"],
        help="Command to run",
    )

    args = parser.parse_args()

    # Set environment variable for config
    os.environ["ECO_INGEST_ENV"] = args.environment

    if args.command == "server":
        run_mqtt_server(args)
    elif args.command == "setup-db":
        setup_database(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
