"""
Logging Configuration Module

Thread-safe logging for the web application: every request thread writes to a
queue and a single listener thread formats and prints the records.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional

from flask import has_request_context, request

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [uid=%(user_id)s %(request_line)s] - "
    "%(filename)s:%(lineno)d - %(message)s"
)


class RequestContextFilter(logging.Filter):
    """
    Stamp records with the calling user and request.

    Runs in the logging thread, before the record is queued, since the listener
    thread has no request context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.user_id = request.cookies.get("uid") or "-"
            record.request_line = f"{request.method} {request.path}"
        else:
            record.user_id = "-"
            record.request_line = "-"
        return True


class ThreadSafeLoggingConfig:
    """Thread-safe logging configuration with queue-based logging."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None

    def setup_logging(self, debug: bool = False) -> None:
        """
        Configure queue-based logging and silence chatty libraries.

        Args:
            debug: Whether to enable debug logging
        """
        if self._log_listener:
            self.stop()

        self._log_queue = Queue()
        queue_handler = logging.handlers.QueueHandler(self._log_queue)
        queue_handler.addFilter(RequestContextFilter())

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()  # Remove any existing handlers
        root_logger.addHandler(queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        if not debug:
            self._silence_noisy_libraries()

    def _silence_noisy_libraries(self) -> None:
        """Silence noisy third-party libraries."""
        # Werkzeug logs one line per request
        for name in ("werkzeug", "urllib3", "asyncio", "apscheduler"):
            logger = logging.getLogger(name)
            logger.setLevel(logging.WARNING)

    def stop(self) -> None:
        """Stop the logging listener and cleanup."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        if self._log_queue:
            self._log_queue = None


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False) -> None:
    """
    Setup thread-safe logging configuration.

    Args:
        debug: Whether to enable debug logging
    """
    logging_config.setup_logging(debug)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()
