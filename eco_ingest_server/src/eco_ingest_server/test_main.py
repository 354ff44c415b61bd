import sys
from unittest.mock import patch

import pytest

from eco_ingest_server import __main__ as cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ECO_INGEST_ENV", "development")  # restored after the CLI overwrites it
    for name in ("MQTT_BROKER", "DATABASE_URL", "CWA_API_SERVICE"):
        monkeypatch.delenv(name, raising=False)


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["eco-ingest", *argv])
    cli.main()


def test_missing_configuration_is_fatal(monkeypatch):
    with patch("eco_ingest_server.adapters.mqtt.server.main") as mqtt_main:
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "--environment", "production", "server")

    assert exc_info.value.code == 1
    mqtt_main.assert_not_called()


def test_server_command_starts_mqtt_loop(monkeypatch):
    with patch("eco_ingest_server.adapters.mqtt.server.main") as mqtt_main:
        run_cli(monkeypatch, "--environment", "testing", "server")

    [settings] = mqtt_main.call_args.args
    assert settings.MQTT_BROKER == "localhost"


def test_keyboard_interrupt_exits_cleanly(monkeypatch):
    with patch("eco_ingest_server.adapters.mqtt.server.main", side_effect=KeyboardInterrupt):
        run_cli(monkeypatch, "--environment", "testing", "server")


def test_setup_db_creates_tables(monkeypatch):
    with patch("sqlalchemy.create_engine") as create_engine, patch(
        "eco_ingest_server.adapters.db.sqlalchemy_models.Base.metadata.create_all"
    ) as create_all:
        run_cli(monkeypatch, "--environment", "testing", "setup-db")

    create_engine.assert_called_once_with("sqlite:///:memory:", future=True, echo=False)
    create_all.assert_called_once_with(bind=create_engine.return_value)
