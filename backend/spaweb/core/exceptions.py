"""
Custom exception classes for the web provider
Provides structured error handling with proper error codes and messages
"""
from typing import Optional, Dict, Any
from fastapi import HTTPException, status


class WebError(Exception):
    """Base exception for web provider errors"""
    def __init__(self, message: str, error_code: str = "WEB_ERROR", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(WebError):
    """Web directory or entry document unusable at startup"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class InvalidInputError(WebError):
    """Entry document unreadable or malformed"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_INPUT", details)


class TransientIOError(WebError):
    """Filesystem error while resolving a single request"""
    def __init__(self, message: str, path: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if path:
            error_details["path"] = path
        super().__init__(message, "TRANSIENT_IO_ERROR", error_details)


def web_error_to_http(exception: WebError) -> HTTPException:
    """Convert WebError to a 500; every provider failure is server-side"""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": exception.error_code,
            "message": exception.message,
            "details": exception.details
        }
    )
