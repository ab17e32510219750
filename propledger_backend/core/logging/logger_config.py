"""
Central logging configuration for PropLedger.
"""

import logging

from .file_logger import FileLogger, route_loggers_to_queue
from .middleware import TransactionIdFilter
from .structured_logger import setup_structured_logging


class LoggingConfig:
    """Owns the handlers installed by ``setup_logging``."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self._is_configured = False

    def setup(
        self,
        log_to_file: bool,
        log_level: str,
        log_file_path: str,
        use_json_format: bool,
        max_bytes: int,
        backup_count: int,
    ) -> logging.Logger:
        if self._is_configured:
            return get_logger()

        transaction_filter = TransactionIdFilter()

        if log_to_file:
            self.file_logger = FileLogger(
                log_file_path=log_file_path,
                max_bytes=max_bytes,
                backup_count=backup_count,
                log_level=log_level,
                use_json_format=use_json_format,
            )
            self.file_logger.start()
            queue_handler = self.file_logger.queue_handler
            queue_handler.addFilter(transaction_filter)
            route_loggers_to_queue(queue_handler, getattr(logging, log_level.upper()))
        else:
            logger = setup_structured_logging(log_level, use_json_format)
            for handler in logger.handlers:
                handler.addFilter(transaction_filter)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging(settings=None) -> logging.Logger:
    """Configure logging from application settings.

    Args:
        settings: Settings instance; defaults to the loaded application settings

    Returns:
        Configured main logger instance
    """
    if settings is None:
        from ...config import settings

    return _logging_config.setup(
        log_to_file=settings.log_to_file,
        log_level=settings.log_level,
        log_file_path=settings.log_file_path,
        use_json_format=settings.log_format.lower() == "json",
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name (will be prefixed with app name)

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"propledger_backend.{name}")
    return logging.getLogger("propledger_backend")


def shutdown_logging() -> None:
    _logging_config.shutdown()
