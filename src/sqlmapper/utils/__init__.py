"""
Utility helpers shared across sqlmapper packages.
"""

from .logging import configure_logging, get_correlation_id, get_logger, set_correlation_id, time_call
from .redaction import redact_params, redact_value

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "redact_params",
    "redact_value",
    "set_correlation_id",
    "time_call",
]
