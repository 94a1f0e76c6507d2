"""Structured logging and in-memory metrics for the proxy client.

This is intentionally lightweight. It provides:
- StructuredLogger: emits JSON-like dicts via the standard logging module.
- MetricsCollector: in-memory counters and timers with a Prometheus-like text export.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Dict, List


class StructuredLogger:
    def __init__(self, name: str = "kafka_proxy", level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            h = logging.StreamHandler()
            fmt = logging.Formatter("%(message)s")
            h.setFormatter(fmt)
            self._logger.addHandler(h)
        self._logger.setLevel(level)

    def set_level(self, level: int) -> None:
        self._logger.setLevel(level)

    def log(self, level: int, event: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        payload = {"ts": time.time(), "event": event, **kwargs}
        try:
            self._logger.log(level, json.dumps(payload))
        except (TypeError, ValueError):
            # fallback to plain string for values json can't encode
            self._logger.log(level, str(payload))

    def debug(self, event: str, **kwargs: Any) -> None:
        self.log(logging.DEBUG, event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self.log(logging.INFO, event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self.log(logging.WARNING, event, **kwargs)


# module-level default logger
logger = StructuredLogger()


class MetricsCollector:
    def __init__(self) -> None:
        self._counters: Dict[str, int] = {}
        self._timings: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def inc(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + amount

    def timing(self, name: str, seconds: float) -> None:
        with self._lock:
            self._timings.setdefault(name, []).append(seconds)

    def get(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def export_prometheus(self) -> str:
        """Return a small Prometheus-like exposition format string."""
        lines: List[str] = []
        with self._lock:
            for k, v in sorted(self._counters.items()):
                lines.append(f"{k} {v}")
            for k, vals in sorted(self._timings.items()):
                if vals:
                    avg = sum(vals) / len(vals)
                    lines.append(f"{k}_count {len(vals)}")
                    lines.append(f"{k}_avg {avg:.6f}")
        return "\n".join(lines)


# module-level default metrics collector
metrics = MetricsCollector()
