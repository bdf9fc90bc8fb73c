"""Logging setup and in-memory telemetry for ScriptAlchemist.

Adapters count requests and errors per provider (``openai_requests``,
``openai_errors``) and time each HTTP call (``openai_request_sec``); the
script service times the analysis and generation steps. ``scriptalchemist -v``
prints the collected numbers when the command finishes.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Dict, Optional

LOGGER_NAME = "scriptalchemist"
LOG_FILE_NAME = "scriptalchemist.log"

# HTTP client libraries that log every request at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "google_genai")


# ============================================================================
# Logging Configuration
# ============================================================================

def configure_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure the ``scriptalchemist`` logger.

    Args:
        log_dir: Optional directory for ``scriptalchemist.log``. If None, logs only to stderr.
        level: Logging level (default: INFO)

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    # stdout carries the analysis and the script, so the console log uses stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / LOG_FILE_NAME, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)


# ============================================================================
# Telemetry (Metrics Collection)
# ============================================================================

class Telemetry:
    """Per-process counters and call durations.

    Nothing is exported; the CLI reads ``summary()`` and ``get_counters()``
    in verbose mode and tests read them to check how many requests were sent.
    """

    def __init__(self):
        self._timings: Dict[str, list[float]] = {}
        self._counters: Dict[str, int] = {}
        self._lock = threading.Lock()

    def record_timing(self, name: str, seconds: float) -> None:
        with self._lock:
            self._timings.setdefault(name, []).append(seconds)

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + amount

    def get_timings(self) -> Dict[str, list[float]]:
        with self._lock:
            return {name: list(values) for name, values in self._timings.items()}

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Return count/total/mean seconds per timing name."""
        out: Dict[str, Dict[str, float]] = {}
        for name, values in self.get_timings().items():
            total = sum(values)
            out[name] = {"count": len(values), "total": total, "mean": total / len(values) if values else 0.0}
        return out


# Process-wide collector behind the module-level helpers below
_default = Telemetry()


def get_collector() -> Telemetry:
    return _default


def record_timing(name: str, seconds: float) -> None:
    _default.record_timing(name, seconds)


def increment(name: str, amount: int = 1) -> None:
    _default.increment(name, amount)
