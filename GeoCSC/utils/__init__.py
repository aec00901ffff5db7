"""
Utility functions for the GeoCSC package.

This module provides helpers shared by the CLI and the API: JSON output
formatting and conversion of unexpected exceptions into the GeoCSC error
taxonomy.
"""

import json
import traceback
from typing import Any, Optional, Type

import click

from GeoCSC.exceptions import GeoDataError
from GeoCSC.utils.logging import get_logger

logger = get_logger(__name__)

def format_json(data: Any, indent: int = 2, sort_keys: bool = False) -> str:
    """
    Format data as a JSON string, keeping non-ASCII names readable.

    Example:
        >>> print(format_json({'id': 5, 'name': 'São Paulo'}))
        {
          "id": 5,
          "name": "São Paulo"
        }
    """
    return json.dumps(
        data,
        indent=indent,
        ensure_ascii=False,
        sort_keys=sort_keys,
        default=str
    )

def print_json(data: Any, indent: int = 2, sort_keys: bool = False) -> None:
    """Print data as formatted JSON to stdout."""
    click.echo(format_json(data, indent, sort_keys))

def log_error(error: Exception, additional_context: Optional[str] = None) -> None:
    """
    Log an error with its traceback at debug level.

    Args:
        error: The exception that occurred
        additional_context: Optional description of where the error occurred
    """
    if additional_context:
        logger.error(f"{additional_context}: {error.__class__.__name__}: {error}")
    else:
        logger.error(f"Error: {error.__class__.__name__}: {error}")

    logger.debug(f"Traceback: {traceback.format_exc()}")

def handle_exception(
    error: Exception,
    error_class: Type[GeoDataError] = GeoDataError,
    user_message: Optional[str] = None,
    context: Optional[str] = None
) -> GeoDataError:
    """
    Log an exception and convert it into a GeoDataError.

    GeoCSC exceptions are returned unchanged; anything else is wrapped in
    ``error_class`` with the original exception kept as ``cause``.

    Args:
        error: The exception to handle
        error_class: GeoDataError subclass used for wrapping
        user_message: User-facing message for the wrapped error
        context: Optional description of where the error occurred

    Returns:
        The resulting GeoDataError
    """
    log_error(error, context)

    if isinstance(error, GeoDataError):
        return error

    return error_class(
        message=f"Unhandled exception: {error}",
        user_message=user_message,
        cause=error
    )
