"""
Centralized logging configuration for the GeoCSC package.

Every GeoCSC module obtains its logger through get_logger(). Output goes to
stderr (and optionally a rotating file) either as plain text or as one JSON
object per line, selected by configuration or environment variables.
"""

import json
import logging
import os
import platform
import socket
import sys
import uuid
from logging.handlers import RotatingFileHandler
from typing import Optional, Dict, Any, Union, List

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Environment variables that override the logging setup
LOG_LEVEL_ENV_VAR = 'GEOCSC_LOG_LEVEL'
LOG_FORMAT_ENV_VAR = 'GEOCSC_LOG_FORMAT'  # 'json' or 'text'
LOG_FILE_ENV_VAR = 'GEOCSC_LOG_FILE'

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL,
}

_logging_configured = False

# Static fields attached to every JSON record
_service_info: Dict[str, Optional[str]] = {
    'service_name': 'geocsc',
    'service_version': None,
    'hostname': socket.gethostname(),
    'os': platform.system(),
}

# Standard LogRecord attributes, everything else passed via `extra` is emitted
_RESERVED_RECORD_FIELDS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime', 'extras'}


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for key, value in _service_info.items():
            if value is not None:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }

        extras = getattr(record, 'extras', None) or {}
        for key, value in extras.items():
            log_data[key] = value
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_FIELDS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that merges fixed context fields into every record.

    Fields given when the adapter is created are combined with any
    ``extra`` passed on the individual call; the call's fields win.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extras = dict(self.extra)
        extras.update(kwargs.get('extra') or {})

        kwargs = dict(kwargs)
        kwargs['extra'] = {'extras': extras}
        return msg, kwargs


def configure_logging(level: Optional[Union[int, str]] = None,
                      format_str: Optional[str] = None,
                      use_json: Optional[bool] = None,
                      log_file: Optional[str] = None) -> None:
    """
    Configure logging for the GeoCSC package.

    Called once at import time with environment defaults; calling it again
    with explicit arguments reconfigures the root logger.

    Args:
        level: Log level (default: INFO or GEOCSC_LOG_LEVEL)
        format_str: Format string for text output
        use_json: Emit JSON lines instead of text (default: GEOCSC_LOG_FORMAT == 'json')
        log_file: Optional log file path (default: GEOCSC_LOG_FILE)
    """
    global _logging_configured

    if _logging_configured and level is None and format_str is None and use_json is None and log_file is None:
        return

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, 'info')
    if isinstance(level, str):
        level = LOG_LEVELS.get(level.lower(), logging.INFO)

    if format_str is None:
        format_str = DEFAULT_LOG_FORMAT

    if use_json is None:
        use_json = os.environ.get(LOG_FORMAT_ENV_VAR, 'text').lower() == 'json'

    if log_file is None:
        log_file = os.environ.get(LOG_FILE_ENV_VAR)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        try:
            handlers.append(RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5))
        except OSError as e:
            print(f"Warning: Could not create log file {log_file}: {e}", file=sys.stderr)

    for handler in handlers:
        handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(format_str))
        root_logger.addHandler(handler)

    _logging_configured = True

    try:
        from GeoCSC import __version__
        _service_info['service_version'] = __version__
    except ImportError:
        pass

    root_logger.debug(
        f"Logging configured with level: {logging.getLevelName(level)}, "
        f"format: {'JSON structured' if use_json else 'text'}"
    )


def set_log_level(level: Union[int, str]) -> None:
    """
    Set the log level for GeoCSC loggers at runtime.

    Args:
        level: 'debug', 'info', 'warning', 'error', 'critical' or a logging constant

    Raises:
        ValueError: If a string level is not recognised
    """
    if isinstance(level, str):
        level_str = level.lower()
        if level_str not in LOG_LEVELS:
            valid_levels = ", ".join(LOG_LEVELS.keys())
            raise ValueError(f"Invalid log level: {level}. Valid levels are: {valid_levels}")
        level = LOG_LEVELS[level_str]

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.debug(f"Log level set to: {logging.getLevelName(level)}")


def get_logger(name: str, extra: Optional[Dict[str, Any]] = None) -> Union[logging.Logger, StructuredLoggerAdapter]:
    """
    Get a logger following GeoCSC conventions.

    Returns a StructuredLoggerAdapter when JSON logging is active or when
    context fields are supplied, otherwise a plain Logger.

    Example:
        >>> logger = get_logger(__name__, {'component': 'loader'})
        >>> logger.info("Dataset loaded", extra={'countries': 250})
    """
    configure_logging()

    logger = logging.getLogger(name)

    root_logger = logging.getLogger()
    json_active = bool(root_logger.handlers) and isinstance(root_logger.handlers[0].formatter, JsonFormatter)
    if json_active or extra:
        return StructuredLoggerAdapter(logger, extra)

    return logger


def get_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return uuid.uuid4().hex


configure_logging()
