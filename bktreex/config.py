from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

_LOGGER = logging.getLogger("bktreex")

_DEFAULT_LOG_LEVEL = "INFO"
_SUPPORTED_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


def _bool_from_env(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_optional_int(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value '{raw}'") from exc


def _normalise_log_level(value: str | None) -> str:
    if value is None or value.strip() == "":
        return _DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    if level not in _SUPPORTED_LOG_LEVELS:
        raise ValueError(f"Unsupported log level '{value}'. Expected one of {_SUPPORTED_LOG_LEVELS}.")
    return level


def _parse_search_workers(raw: str | None) -> int | None:
    workers = _parse_optional_int(raw)
    if workers is None:
        return None
    if workers <= 0:
        raise ValueError(f"BKTREEX_SEARCH_WORKERS must be positive, got {workers}.")
    return workers


def default_worker_count() -> int:
    """Hardware parallelism reported by the platform (at least one)."""

    return os.cpu_count() or 1


@dataclass(frozen=True)
class RuntimeConfig:
    log_level: str
    enable_diagnostics: bool
    search_workers: int | None

    @property
    def resolved_search_workers(self) -> int:
        if self.search_workers is None:
            return default_worker_count()
        return self.search_workers

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        log_level = _normalise_log_level(os.getenv("BKTREEX_LOG_LEVEL"))
        enable_diagnostics = _bool_from_env(
            os.getenv("BKTREEX_ENABLE_DIAGNOSTICS"), default=True
        )
        search_workers = _parse_search_workers(os.getenv("BKTREEX_SEARCH_WORKERS"))
        return cls(
            log_level=log_level,
            enable_diagnostics=enable_diagnostics,
            search_workers=search_workers,
        )


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("bktreex")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter("%(levelname)s %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)


@lru_cache(maxsize=None)
def runtime_config() -> RuntimeConfig:
    config = RuntimeConfig.from_env()
    _configure_logging(config.log_level)
    _LOGGER.debug("Runtime configuration loaded: %s", config)
    return config


def reset_runtime_config_cache() -> None:
    runtime_config.cache_clear()


def describe_runtime() -> Dict[str, Any]:
    """Return a serialisable view of the active runtime configuration."""

    config = runtime_config()
    return {
        "log_level": config.log_level,
        "enable_diagnostics": config.enable_diagnostics,
        "search_workers": config.search_workers,
        "resolved_search_workers": config.resolved_search_workers,
    }


__all__ = [
    "RuntimeConfig",
    "default_worker_count",
    "describe_runtime",
    "reset_runtime_config_cache",
    "runtime_config",
]
