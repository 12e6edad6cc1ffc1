"""Analysis settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def default_max_workers() -> int:
    return min(8, os.cpu_count() or 1)


@dataclass(frozen=True)
class AnalysisConfig:
    max_workers: int = 1
    check_final_write: bool = False
    runtime_snapshot: str | None = None
    log_level: str = "INFO"
    log_format: str = "console"


def resolve_config() -> AnalysisConfig:
    max_workers = _int_env("JARCHECK_MAX_WORKERS", default_max_workers())
    if max_workers < 1:
        raise ValueError("JARCHECK_MAX_WORKERS must be at least 1")

    log_format = os.getenv("JARCHECK_LOG_FORMAT", "console").lower()
    if log_format not in {"console", "json"}:
        raise ValueError(f"JARCHECK_LOG_FORMAT must be console or json, got {log_format!r}")

    return AnalysisConfig(
        max_workers=max_workers,
        check_final_write=_bool_env("JARCHECK_CHECK_FINAL_WRITE", False),
        runtime_snapshot=os.getenv("JARCHECK_RUNTIME_SNAPSHOT") or None,
        log_level=os.getenv("JARCHECK_LOG_LEVEL", "INFO").upper(),
        log_format=log_format,
    )


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")
