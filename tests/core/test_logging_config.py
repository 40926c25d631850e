"""Tests for ecohouse/core/logging.py - dictConfig built from env vars."""

from ecohouse.core.logging import build_logging_config, env_bool


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG", " Yes ")
    assert env_bool("FLAG", default=False) is True

    monkeypatch.setenv("FLAG", "off")
    assert env_bool("FLAG", default=True) is False

    monkeypatch.delenv("FLAG")
    assert env_bool("FLAG", default=True) is True


def test_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_JSON", "LOG_REQUESTS", "LOG_UVICORN_ACCESS"):
        monkeypatch.delenv(name, raising=False)

    config = build_logging_config()

    assert config["root"]["level"] == "INFO"
    assert config["handlers"]["console"]["formatter"] == "text"
    # The middleware owns access logging by default.
    assert config["loggers"]["uvicorn.access"]["level"] == "WARNING"
    assert config["loggers"]["httpx"]["level"] == "WARNING"


def test_json_and_level(monkeypatch):
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = build_logging_config()

    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["root"]["level"] == "DEBUG"
    assert config["loggers"]["uvicorn"]["level"] == "DEBUG"


def test_uvicorn_access_log_when_middleware_disabled(monkeypatch):
    monkeypatch.setenv("LOG_REQUESTS", "false")
    monkeypatch.delenv("LOG_UVICORN_ACCESS", raising=False)

    config = build_logging_config()

    assert config["loggers"]["uvicorn.access"]["level"] == "INFO"
