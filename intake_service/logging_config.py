"""
Logging Configuration Module

This module provides thread-safe logging configuration for the site backend,
including setup for queue-based logging and quieting of chatty libraries.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


class ThreadSafeLoggingConfig:
    """Thread-safe logging configuration with queue-based logging."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None

    def setup_logging(self, level: Union[str, int] = logging.INFO, debug: bool = False) -> None:
        """
        Configure thread-safe logging for the server and quiet chatty libraries.

        Request threads write to a queue and a single listener thread formats
        and prints the records, so lines from concurrent requests never mix.

        Args:
            level: Root log level name or number (ignored when debug is set)
            debug: Whether to enable debug logging
        """
        # Restart cleanly if called twice (e.g. app factory in tests)
        self.stop()

        self._log_queue = Queue()
        queue_handler = logging.handlers.QueueHandler(self._log_queue)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else _resolve_level(level))

        if not debug:
            self._quiet_noisy_libraries()

    def _quiet_noisy_libraries(self) -> None:
        """Raise the threshold of libraries that log every request or lock."""
        for name in ("werkzeug", "filelock", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)

    def stop(self) -> None:
        """Stop the logging listener and cleanup."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        if self._log_queue:
            self._log_queue = None


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(level: Union[str, int] = logging.INFO, debug: bool = False) -> None:
    """
    Setup thread-safe logging configuration.

    Args:
        level: Root log level name or number
        debug: Whether to enable debug logging
    """
    logging_config.setup_logging(level, debug)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
