"""Logging infrastructure for PropLedger backend."""

from .context import get_transaction_id, set_transaction_id
from .file_logger import FileLogger
from .logger_config import get_logger, setup_logging, shutdown_logging
from .middleware import RequestIdMiddleware, TransactionIdFilter
from .structured_logger import StructuredFormatter

__all__ = [
    "FileLogger",
    "StructuredFormatter",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "RequestIdMiddleware",
    "TransactionIdFilter",
    "get_transaction_id",
    "set_transaction_id",
]
