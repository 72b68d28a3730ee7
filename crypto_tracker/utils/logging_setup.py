"""
Category logging for the tracker.

Every module logs through get_logger(__name__), which maps the module path
onto one of three category loggers:

- system: startup, shutdown, configuration, the dashboard and commands
- adapter: CoinMarketCap requests and provider errors
- data: the refresh pipeline, snapshots and portfolio persistence

setup_category_logging() gives each category its own JSON-lines file for the
run, under logs/{date}/. Records travel through a queue and are written by a
listener thread, so a slow disk never stalls the UI thread. The dashboard owns
the terminal; stderr output is only added for headless runs.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import re
import sys
from datetime import datetime
from pathlib import Path
from queue import Queue
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .trace_context import get_cycle_id

LOGGER_PREFIX = "crypto_tracker"

CATEGORIES = ["system", "adapter", "data"]

# Short tags used in file names
_FILE_TAGS = {
    "system": "sys",
    "adapter": "adp",
    "data": "dat",
}

# First matching prefix wins, so keep the narrow ones on top
MODULE_ROUTING: List[Tuple[str, str]] = [
    ("crypto_tracker.infrastructure.adapters", "adapter"),
    ("crypto_tracker.infrastructure.stores", "data"),
    ("crypto_tracker.application.refresh_pipeline", "data"),
    ("crypto_tracker.application.snapshot_channel", "data"),
    ("crypto_tracker.models", "data"),
]
DEFAULT_CATEGORY = "system"

_run_number: Optional[int] = None
_timestamp_tz: Optional[ZoneInfo] = None
_listeners: List[logging.handlers.QueueListener] = []


def get_category_for_module(module_name: str) -> str:
    """Category for a dotted module path; anything unrouted is system."""
    for prefix, category in MODULE_ROUTING:
        if module_name.startswith(prefix):
            return category
    return DEFAULT_CATEGORY


def get_logger(module_name: str) -> logging.Logger:
    """
    Logger for the category a module belongs to.

    Example:
        logger = get_logger(__name__)
        logger.info("Fetching prices...")
    """
    return logging.getLogger(f"{LOGGER_PREFIX}.{get_category_for_module(module_name)}")


def set_log_timezone(tz: Optional[str] = None) -> None:
    """
    Timezone for record timestamps.

    Args:
        tz: IANA name such as "UTC". None or "local" means system time.

    Raises:
        ZoneInfoNotFoundError: If the name is unknown.
    """
    global _timestamp_tz
    _timestamp_tz = None if tz is None or tz.lower() == "local" else ZoneInfo(tz)


def _format_created(record: logging.LogRecord) -> str:
    if _timestamp_tz is None:
        return datetime.fromtimestamp(record.created).isoformat()
    return datetime.fromtimestamp(record.created, _timestamp_tz).isoformat()


class CycleIdFilter(logging.Filter):
    """Copies the emitting thread's cycle id onto the record.

    Formatting happens later on the listener thread, where the caller's
    ContextVar is not visible.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "cycle_id"):
            record.cycle_id = get_cycle_id()
        return True


def _cycle_of(record: logging.LogRecord) -> str:
    return getattr(record, "cycle_id", None) or get_cycle_id()


class JSONFormatter(logging.Formatter):
    """One JSON object per line: ts, level, cat, cycle, msg (+ data, exception)."""

    def format(self, record: logging.LogRecord) -> str:
        category = record.name.rpartition(".")[2]
        entry = {
            "ts": _format_created(record),
            "level": record.levelname,
            "cat": category if category in CATEGORIES else DEFAULT_CATEGORY,
            "cycle": _cycle_of(record),
            "msg": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """`[LEVEL  ] [cycle] message`, colored by level on a TTY."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = f"[{record.levelname:7}]"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"
        return f"{level} [{_cycle_of(record)}] {record.getMessage()}"


def _log_file_name(env: str, category: str, date_str: str, run: int) -> str:
    return f"crypto_tracker_{env}_{_FILE_TAGS[category]}_{date_str}_{run}.log"


def _next_run_number(day_dir: Path, env: str, date_str: str) -> int:
    """One past the highest run number already on disk for this env and day."""
    if not day_dir.is_dir():
        return 1
    pattern = re.compile(
        rf"^crypto_tracker_{re.escape(env)}_(?:sys|adp|dat)_{re.escape(date_str)}_(\d+)\.log$"
    )
    runs = [int(m.group(1)) for m in map(pattern.match, os.listdir(day_dir)) if m]
    return max(runs, default=0) + 1


def reset_session_run_number() -> None:
    """Forget the run number picked by the first setup (tests)."""
    global _run_number
    _run_number = None


def _detach_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_category_logging(
    env: str,
    log_dir: str = "./logs",
    level: str = "INFO",
    console: bool = False,
    verbose: bool = False,
) -> Dict[str, logging.Logger]:
    """
    Attach file (and optionally console) handlers to the category loggers.

    Files: {log_dir}/{date}/crypto_tracker_{env}_{sys|adp|dat}_{date}_{run}.log,
    where run is fixed for the process the first time this is called.

    Args:
        env: Environment name, part of the file names.
        log_dir: Base directory.
        level: Level name; unknown names fall back to INFO.
        console: Also write to stderr.
        verbose: Force DEBUG.

    Returns:
        Category name -> logger.
    """
    global _run_number
    shutdown_logging()

    numeric_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    date_str = datetime.now().strftime("%Y-%m-%d")
    day_dir = Path(log_dir) / date_str
    if _run_number is None:
        _run_number = _next_run_number(day_dir, env, date_str)
    day_dir.mkdir(parents=True, exist_ok=True)

    loggers: Dict[str, logging.Logger] = {}
    for category in CATEGORIES:
        logger = logging.getLogger(f"{LOGGER_PREFIX}.{category}")
        _detach_handlers(logger)
        logger.setLevel(numeric_level)
        logger.propagate = False

        file_handler = logging.FileHandler(
            day_dir / _log_file_name(env, category, date_str, _run_number),
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())

        records: Queue = Queue(-1)
        queue_handler = logging.handlers.QueueHandler(records)
        queue_handler.addFilter(CycleIdFilter())
        logger.addHandler(queue_handler)

        listener = logging.handlers.QueueListener(records, file_handler)
        listener.start()
        _listeners.append(listener)

        if console:
            stream = logging.StreamHandler(sys.stderr)
            stream.setFormatter(ConsoleFormatter(use_colors=sys.stderr.isatty()))
            logger.addHandler(stream)

        loggers[category] = logger

    return loggers


def shutdown_logging() -> None:
    """Drain the queues and stop the writer threads."""
    while _listeners:
        listener = _listeners.pop()
        listener.stop()
        for handler in listener.handlers:
            handler.close()
