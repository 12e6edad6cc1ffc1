from __future__ import annotations

import logging

import pytest
import structlog

from jarcheck.config import AnalysisConfig, default_max_workers, resolve_config
from jarcheck.log import configure_logging


def test_resolve_config_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "JARCHECK_MAX_WORKERS",
        "JARCHECK_CHECK_FINAL_WRITE",
        "JARCHECK_RUNTIME_SNAPSHOT",
        "JARCHECK_LOG_LEVEL",
        "JARCHECK_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)

    config = resolve_config()

    assert config == AnalysisConfig(max_workers=default_max_workers())


def test_resolve_config_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("JARCHECK_MAX_WORKERS", "3")
    monkeypatch.setenv("JARCHECK_CHECK_FINAL_WRITE", "yes")
    monkeypatch.setenv("JARCHECK_RUNTIME_SNAPSHOT", "/tmp/runtime.json")
    monkeypatch.setenv("JARCHECK_LOG_LEVEL", "debug")
    monkeypatch.setenv("JARCHECK_LOG_FORMAT", "JSON")

    config = resolve_config()

    assert config.max_workers == 3
    assert config.check_final_write is True
    assert config.runtime_snapshot == "/tmp/runtime.json"
    assert config.log_level == "DEBUG"
    assert config.log_format == "json"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("JARCHECK_MAX_WORKERS", "many"),
        ("JARCHECK_MAX_WORKERS", "0"),
        ("JARCHECK_CHECK_FINAL_WRITE", "maybe"),
        ("JARCHECK_LOG_FORMAT", "xml"),
    ],
)
def test_invalid_environment_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        resolve_config()


def test_configure_logging_installs_single_handler():
    configure_logging("debug", json_format=True)
    configure_logging("warning")

    root_logger = logging.getLogger()
    assert len(root_logger.handlers) == 1
    assert root_logger.level == logging.WARNING
    assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
