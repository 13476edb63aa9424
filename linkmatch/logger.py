"""
Structured logging for LinkMatch runs.

Console and daily file output with JSON context, plus counters for one
matching batch (searches per provider, cache usage, matched contacts).
Only the application layer builds the logger; library code that must stay
I/O free logs through plain ``logging.getLogger(__name__)`` children of it.
"""

import json
import logging
import os
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass
class RunMetrics:
    """Counters for one matching batch."""

    api_calls: int = 0
    searches_attempted: int = 0
    searches_successful: int = 0
    searches_failed: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    contacts_matched: int = 0
    errors_by_type: Dict[str, int] = field(default_factory=dict)
    # provider -> {"attempts": n, "successes": n}
    providers: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def provider(self, name: str) -> Dict[str, int]:
        return self.providers.setdefault(name, {"attempts": 0, "successes": 0})

    def as_dict(self) -> dict:
        rates = {}
        for name, stats in self.providers.items():
            rates[name] = dict(stats)
            if stats["attempts"]:
                rates[name]["success_rate"] = round(stats["successes"] / stats["attempts"], 3)
        return {
            "api_calls": self.api_calls,
            "searches_attempted": self.searches_attempted,
            "searches_successful": self.searches_successful,
            "searches_failed": self.searches_failed,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "contacts_matched": self.contacts_matched,
            "errors_by_type": dict(self.errors_by_type),
            "provider_success_rate": rates,
        }


class StructuredLogger:
    """Logger with console and file outputs that also tracks run metrics."""

    def __init__(
        self,
        name: str = "linkmatch",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to a daily file
            enable_console: Write logs to stdout
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        _close_handlers(self.logger)
        self.logger.propagate = False

        self.metrics = RunMetrics()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
            self.logger.addHandler(console_handler)

        if enable_file:
            log_dir = Path(log_dir) if log_dir is not None else Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / f"linkmatch_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context):
        self._log(logging.ERROR, message, context)

    def _log(self, level: int, message: str, context: dict):
        if not self.logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        # stacklevel points %(lineno)d at the caller of debug()/info()/...
        self.logger.log(level, message, stacklevel=3)

    def close(self):
        """Detach and close this logger's handlers."""
        _close_handlers(self.logger)

    # Run metrics

    def record_api_call(self):
        self.metrics.api_calls += 1

    def record_search_attempt(self, provider: str):
        self.metrics.searches_attempted += 1
        self.metrics.provider(provider)["attempts"] += 1

    def record_search_success(self, provider: str):
        self.metrics.searches_successful += 1
        self.metrics.provider(provider)["successes"] += 1

    def record_search_failure(self, provider: str, error_type: str):
        self.metrics.searches_failed += 1
        errors = self.metrics.errors_by_type
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_cache_hit(self):
        self.metrics.cache_hits += 1

    def record_cache_miss(self):
        self.metrics.cache_misses += 1

    def record_contact_matched(self):
        self.metrics.contacts_matched += 1

    def get_metrics(self) -> dict:
        """Snapshot of the run metrics with per-provider success rates."""
        return self.metrics.as_dict()

    def log_metrics_summary(self):
        m = self.metrics
        rate = round(m.searches_successful / m.searches_attempted * 100, 1) if m.searches_attempted else 0

        self.info("=== Matching Session Metrics ===")
        self.info(f"Contacts matched: {m.contacts_matched}")
        self.info(f"API Calls: {m.api_calls}")
        self.info(f"Searches: {m.searches_successful}/{m.searches_attempted} ({rate}% success)")
        self.info(f"Cache: {m.cache_hits} hits, {m.cache_misses} misses")

        for provider, stats in self.get_metrics()["provider_success_rate"].items():
            provider_rate = stats.get("success_rate", 0) * 100
            self.info(f"  {provider}: {stats['successes']}/{stats['attempts']} ({provider_rate:.1f}%)")

        if m.errors_by_type:
            self.info("Error Types:")
            for error_type, count in m.errors_by_type.items():
                self.info(f"  {error_type}: {count}")


def _close_handlers(logger: logging.Logger):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


_global_logger: Optional[StructuredLogger] = None
_global_lock = threading.Lock()


def get_logger(
    name: str = "linkmatch",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the process-wide logger.

    Level and log directory default to LINKMATCH_LOG_LEVEL and
    LINKMATCH_LOG_DIR when set.
    """
    global _global_logger

    with _global_lock:
        if _global_logger is None:
            level = level or os.getenv("LINKMATCH_LOG_LEVEL", "INFO")
            if "log_dir" not in kwargs and os.getenv("LINKMATCH_LOG_DIR"):
                kwargs["log_dir"] = Path(os.environ["LINKMATCH_LOG_DIR"])
            _global_logger = StructuredLogger(name=name, level=level, **kwargs)
        return _global_logger


def reset_logger():
    """Close and drop the process-wide logger (useful for testing)."""
    global _global_logger

    with _global_lock:
        if _global_logger is not None:
            _global_logger.close()
        _global_logger = None
