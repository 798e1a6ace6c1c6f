from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

import psutil

from bktreex import config as bx_config


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


class OperationLog:
    """Collects wall/CPU/RSS figures and caller metadata for one operation."""

    __slots__ = ("name", "_metadata", "_process", "_start", "_cpu_before", "_rss_before")

    def __init__(self, name: str, *, enable_resources: bool) -> None:
        self.name = name
        self._metadata: Dict[str, Any] = {}
        self._process = psutil.Process() if enable_resources else None
        self._cpu_before = self._process.cpu_times() if self._process else None
        self._rss_before = self._process.memory_info().rss if self._process else None
        self._start = time.perf_counter()

    def add_metadata(self, **values: Any) -> None:
        self._metadata.update(values)

    @property
    def metadata(self) -> Dict[str, Any]:
        return dict(self._metadata)

    def render(self) -> str:
        wall_ms = (time.perf_counter() - self._start) * 1e3
        if self._process is not None:
            cpu_after = self._process.cpu_times()
            rss_after = self._process.memory_info().rss
            cpu_user_ms = _format_value((cpu_after.user - self._cpu_before.user) * 1e3)
            rss_delta = str(int(rss_after - self._rss_before))
        else:
            cpu_user_ms = "NA"
            rss_delta = "NA"
        parts = [
            f"op={self.name}",
            f"wall_ms={wall_ms:.3f}",
            f"cpu_user_ms={cpu_user_ms}",
            f"rss_delta={rss_delta}",
        ]
        parts.extend(f"{key}={_format_value(value)}" for key, value in self._metadata.items())
        return " ".join(parts)


@contextmanager
def log_operation(logger: logging.Logger, name: str) -> Iterator[OperationLog]:
    """Log one ``op=<name>`` line at INFO when the wrapped block exits."""

    runtime = bx_config.runtime_config()
    op_log = OperationLog(name, enable_resources=runtime.enable_diagnostics)
    failed = False
    try:
        yield op_log
    except BaseException:
        failed = True
        raise
    finally:
        if failed:
            op_log.add_metadata(failed=True)
        if logger.isEnabledFor(logging.INFO):
            logger.info(op_log.render())


__all__ = ["OperationLog", "log_operation"]
