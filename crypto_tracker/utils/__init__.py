"""Utility modules."""

from .logging_setup import (
    get_logger,
    reset_session_run_number,
    set_log_timezone,
    setup_category_logging,
    shutdown_logging,
)
from .result import Err, Ok, Result
from .trace_context import get_cycle_id, new_cycle

__all__ = [
    # Logging setup
    "get_logger",
    "reset_session_run_number",
    "set_log_timezone",
    "setup_category_logging",
    "shutdown_logging",
    # Trace context
    "get_cycle_id",
    "new_cycle",
    # Result type
    "Result",
    "Ok",
    "Err",
]
