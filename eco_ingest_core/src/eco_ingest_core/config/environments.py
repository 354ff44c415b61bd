from enum import Enum
from typing import Optional

from pydantic_settings import BaseSettings


class Environment(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TESTING = "testing"


class Settings(BaseSettings):
    """Configuration settings for the eco telemetry ingest service.

    MQTT_BROKER, DATABASE_URL and CWA_API_SERVICE have no default: the
    service refuses to start until all three are provided.
    """

    # Environment
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # MQTT
    MQTT_BROKER: str
    MQTT_PORT: int = 1883
    MQTT_USERNAME: Optional[str] = None
    MQTT_PASSWORD: Optional[str] = None
    MQTT_NAMESPACE: str = "eco_clients"
    MQTT_CLIENT_ID: str = "mqtt_backend_eco_app_sys"
    MQTT_KEEPALIVE: int = 60

    # Database (PostgreSQL)
    DATABASE_URL: str
    DB_TIMEOUT_SEC: float = 5.0

    # Weather enrichment
    CWA_API_SERVICE: str
    WEATHER_TIMEOUT_SEC: float = 5.0

    # Worker pool
    WORKER_COUNT: int = 4
    WORKER_QUEUE_SIZE: int = 1000

    # Acknowledgement
    ACK_PAYLOAD: str = "ok"
    ACK_ECHO_PAYLOAD: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


def get_settings() -> Settings:
    """Get settings based on environment."""
    import os

    # Set environment-specific defaults
    env = os.getenv("ECO_INGEST_ENV", "development").lower()

    if env == "production":
        return Settings(ENVIRONMENT=Environment.PRODUCTION, LOG_LEVEL="WARNING")
    elif env == "testing":
        return Settings(
            ENVIRONMENT=Environment.TESTING,
            MQTT_BROKER="localhost",
            MQTT_NAMESPACE="test_eco_clients",
            MQTT_CLIENT_ID="mqtt_backend_eco_app_sys_test",
            DATABASE_URL="sqlite:///:memory:",
            CWA_API_SERVICE="http://localhost:8080/cwa",
            WEATHER_TIMEOUT_SEC=1.0,
            WORKER_COUNT=1,
            LOG_LEVEL="DEBUG",
        )
    else:
        return Settings(ENVIRONMENT=Environment.DEVELOPMENT, LOG_LEVEL="DEBUG")
