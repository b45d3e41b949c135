"""
Logging configuration for the Nearby Deals API
Provides structured logging for production monitoring
"""

import logging
import json
import sys
from datetime import datetime, timezone


# Structured fields copied from `extra=` onto the JSON log line when present
_EXTRA_FIELDS = (
    "request_id",
    "lat",
    "lon",
    "category",
    "provider",
    "api_name",
    "endpoint",
    "mirror",
    "result_count",
    "response_time",
    "error_type",
    "upstream_status",
)


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        # Add exception info if present
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Set up logging configuration for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Whether to use JSON formatting for structured logs
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    logging.getLogger("dealfinder").setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(f"dealfinder.{name}")


def log_api_call(logger: logging.Logger, api_name: str, endpoint: str,
                 request_id: str = None, **kwargs):
    """
    Log an outbound provider call with structured data.

    Args:
        logger: Logger instance
        api_name: Name of the provider being called
        endpoint: Provider endpoint
        request_id: Optional request ID for tracing
        **kwargs: Additional fields to log
    """
    extra = {
        "api_name": api_name,
        "endpoint": endpoint,
        **kwargs
    }
    if request_id:
        extra["request_id"] = request_id

    logger.info(f"API call to {api_name}: {endpoint}", extra=extra)


def log_error(logger: logging.Logger, error_type: str, message: str,
              request_id: str = None, **kwargs):
    """
    Log an error with structured data.

    Args:
        logger: Logger instance
        error_type: Type of error (e.g., "api_error", "timeout", "validation")
        message: Error message
        request_id: Optional request ID for tracing
        **kwargs: Additional fields to log
    """
    extra = {
        "error_type": error_type,
        **kwargs
    }
    if request_id:
        extra["request_id"] = request_id

    logger.error(message, extra=extra)


def log_performance(logger: logging.Logger, operation: str, duration: float,
                   request_id: str = None, **kwargs):
    """
    Log performance metrics.

    Args:
        logger: Logger instance
        operation: Name of the operation
        duration: Duration in seconds
        request_id: Optional request ID for tracing
        **kwargs: Additional fields to log
    """
    extra = {
        "response_time": duration,
        **kwargs
    }
    if request_id:
        extra["request_id"] = request_id

    logger.info(f"Performance: {operation} took {duration:.2f}s", extra=extra)
