"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from goal_indexer.config.settings import Settings
from tests.fakes import FACTORY

ENV_VARS = (
    "RPC_URL",
    "FACTORY_ADDRESS",
    "START_BLOCK",
    "POLL_INTERVAL_MS",
    "MAX_EVENTS",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("RPC_URL", "http://localhost:8545")
        monkeypatch.setenv("FACTORY_ADDRESS", FACTORY)

        settings = Settings(_env_file=None)

        assert settings.start_block == 0
        assert settings.poll_interval_ms == 12000
        assert settings.poll_interval_seconds == 12.0
        assert settings.max_events == 1000
        assert settings.port == 8081
        assert settings.cors_origin == "*"

    def test_overrides_from_environment(self, monkeypatch):
        monkeypatch.setenv("RPC_URL", "http://node:8545")
        monkeypatch.setenv("FACTORY_ADDRESS", FACTORY.lower())
        monkeypatch.setenv("START_BLOCK", "1500")
        monkeypatch.setenv("POLL_INTERVAL_MS", "500")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.factory_address == FACTORY
        assert settings.start_block == 1500
        assert settings.poll_interval_seconds == 0.5
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("missing", ["RPC_URL", "FACTORY_ADDRESS"])
    def test_required_values(self, monkeypatch, missing):
        """Startup fails without a node URL or factory address."""
        values = {"RPC_URL": "http://localhost:8545", "FACTORY_ADDRESS": FACTORY}
        for name, value in values.items():
            if name != missing:
                monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @pytest.mark.parametrize(
        "address",
        ["0x1234", "fa" * 21, "0x" + "zz" * 20],
    )
    def test_invalid_factory_address(self, monkeypatch, address):
        monkeypatch.setenv("RPC_URL", "http://localhost:8545")
        monkeypatch.setenv("FACTORY_ADDRESS", address)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
