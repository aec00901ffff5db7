"""
Custom exceptions for the GeoCSC package.

This module defines a hierarchical exception system that provides:
1. Specific, technical error information for debugging and logging
2. User-friendly error messages for API clients
3. Error codes for consistent error identification
4. Optional context information for additional debugging

Load-time errors (DataUnavailableError, DataMalformedError) are fatal: the
service must not start with an absent or corrupt dataset. Query-time errors
(CountryNotFoundError, StateNotFoundError) are expected outcomes that the
caller translates into a not-found response.
"""

from typing import Optional, Dict, Any
import traceback
import sys

class GeoDataError(Exception):
    """Base exception for all GeoCSC errors."""

    status_code = 500
    error_code = "CSC-GENERIC-ERROR"
    user_message = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        user_message: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        include_traceback: bool = True
    ):
        # Technical message for logs
        self.message = message or self.__class__.__doc__ or "An error occurred."
        super().__init__(self.message)

        self.user_message = user_message or self.__class__.user_message
        self.error_code = error_code or self.__class__.error_code
        self.status_code = status_code or self.__class__.status_code

        self.context = context or {}
        self.cause = cause

        self.traceback = None
        if include_traceback:
            self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary for API responses."""
        error_dict = {
            "error_code": self.error_code,
            "message": self.user_message,
            "status_code": self.status_code,
        }

        # Technical details are only exposed in debug mode
        if self.context.get('debug'):
            error_dict["technical_details"] = {
                "message": self.message,
                "context": {k: v for k, v in self.context.items() if k != 'debug'},
            }
            if self.traceback:
                error_dict["technical_details"]["traceback"] = self.traceback
            if self.cause:
                error_dict["technical_details"]["cause"] = str(self.cause)

        return error_dict


# Data Errors - 2000 range
class DataError(GeoDataError):
    """Base exception for all dataset-related errors."""
    status_code = 500
    error_code = "CSC-DATA-2000"
    user_message = "An error occurred with the geographic dataset."


class DataUnavailableError(DataError):
    """Exception raised when the dataset source cannot be found or read."""
    status_code = 503
    error_code = "CSC-DATA-2001"
    user_message = "Geographic data is currently unavailable."


class DataMalformedError(DataError):
    """Exception raised when the dataset cannot be parsed into the expected shape."""
    error_code = "CSC-DATA-2002"
    user_message = "Geographic data is corrupt and cannot be served."


class NotFoundError(DataError):
    """Exception raised when a requested resource is not in the index."""
    status_code = 404
    error_code = "CSC-DATA-2003"
    user_message = "The requested resource could not be found."


class CountryNotFoundError(NotFoundError):
    """Exception raised when no country matches the requested ISO2 code."""
    error_code = "CSC-DATA-2004"
    user_message = "Country not found"

    def __init__(self, country_code: str, **kwargs: Any):
        self.country_code = country_code
        kwargs.setdefault('message', f"Country not found: {country_code!r}")
        kwargs.setdefault('context', {'country_code': country_code})
        kwargs.setdefault('include_traceback', False)
        super().__init__(**kwargs)


class StateNotFoundError(NotFoundError):
    """Exception raised when a state id does not belong to the requested country."""
    error_code = "CSC-DATA-2005"
    user_message = "State not found for this country"

    def __init__(self, country_code: str, state_id: Any, **kwargs: Any):
        self.country_code = country_code
        self.state_id = state_id
        kwargs.setdefault('message', f"State {state_id!r} not found for country {country_code!r}")
        kwargs.setdefault('context', {'country_code': country_code, 'state_id': state_id})
        kwargs.setdefault('include_traceback', False)
        super().__init__(**kwargs)


# API Errors - 3000 range
class APIError(GeoDataError):
    """Base exception for all API-related errors."""
    status_code = 400
    error_code = "CSC-API-3000"
    user_message = "An API error occurred while processing your request."


class InvalidParameterError(APIError):
    """Exception raised when request parameters are invalid."""
    status_code = 400
    error_code = "CSC-API-3001"
    user_message = "Invalid parameters provided. Please check your request."


# System Errors - 4000 range
class SystemError(GeoDataError):
    """Base exception for all system-related errors."""
    status_code = 500
    error_code = "CSC-SYS-4000"
    user_message = "A system error occurred. Please try again later."


class ConfigError(SystemError):
    """Exception raised when there's an error in system configuration."""
    error_code = "CSC-SYS-4001"
    user_message = "The system is incorrectly configured. Please contact support."
