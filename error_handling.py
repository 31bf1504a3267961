"""
Error Handling System
=====================

Typed failures for the theme finder:
- Custom exception hierarchy (not found / parse / theme not found)
- Error context tracking
- User-friendly error messages
"""

# ============================================================================
# IMPORTS
# ============================================================================

import time
import traceback
from typing import Optional
from enum import Enum


# ============================================================================
# ERROR SEVERITY LEVELS
# ============================================================================

class ErrorSeverity(Enum):
    """Error severity levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# ============================================================================
# CUSTOM EXCEPTION HIERARCHY
# ============================================================================

class ThemeFinderError(Exception):
    """Base exception for all theme finder errors"""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        user_message: Optional[str] = None,
        context: Optional[dict] = None
    ):
        """
        Initialize theme finder error

        Args:
            message: Technical error message (for logs)
            severity: Error severity level
            user_message: User-friendly message (for the CLI)
            context: Additional context (dict)
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.user_message = user_message or message
        self.context = context or {}
        self.timestamp = time.time()

    def to_dict(self) -> dict:
        """Convert error to dictionary"""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "context": self.context,
            "timestamp": self.timestamp
        }


class NotFoundError(ThemeFinderError):
    """An expected editor file or directory is missing"""
    def __init__(self, message: str, **kwargs):
        path = (kwargs.get("context") or {}).get("path")
        super().__init__(
            message,
            severity=ErrorSeverity.ERROR,
            user_message=f"File not found: {path}" if path else message,
            **kwargs
        )


class BaseDirNotFoundError(NotFoundError):
    """No per-user configuration directory could be resolved"""
    def __init__(self, message: str = "Cannot find the user configuration directory", **kwargs):
        super().__init__(message, **kwargs)
        self.user_message = "Cannot find the user configuration directory."


class ParseError(ThemeFinderError):
    """Editor file is present but malformed or lacks the expected field"""
    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            severity=ErrorSeverity.ERROR,
            user_message=f"Could not parse editor data: {message}",
            **kwargs
        )


class ThemeNotFoundError(ThemeFinderError):
    """No installed extension declares the requested theme"""
    def __init__(self, theme_name: str, **kwargs):
        context = dict(kwargs.pop("context", None) or {})
        context["theme"] = theme_name
        super().__init__(
            f"No installed theme extension provides '{theme_name}'",
            severity=ErrorSeverity.WARNING,
            user_message=f"Theme '{theme_name}' is not provided by any installed extension.",
            context=context,
            **kwargs
        )
        self.theme_name = theme_name


class ConfigurationError(ThemeFinderError):
    """Configuration-related errors"""
    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            user_message=f"Configuration error: {message}",
            **kwargs
        )


# ============================================================================
# EXCEPTION FORMATTER
# ============================================================================

class ExceptionFormatter:
    """Format exceptions for display"""

    @staticmethod
    def format_for_log(exception: Exception, include_traceback: bool = True) -> str:
        """
        Format exception for log file

        Args:
            exception: Exception to format
            include_traceback: Include full traceback

        Returns:
            Formatted string
        """
        if isinstance(exception, ThemeFinderError):
            parts = [
                f"Error Type: {exception.__class__.__name__}",
                f"Severity: {exception.severity.value}",
                f"Message: {exception.message}",
            ]

            if exception.context:
                parts.append(f"Context: {exception.context}")

            if include_traceback:
                parts.append(f"Traceback:\n{traceback.format_exc()}")

            return "\n".join(parts)
        else:
            if include_traceback:
                return f"{exception}\n{traceback.format_exc()}"
            else:
                return str(exception)

    @staticmethod
    def format_for_user(exception: Exception) -> str:
        """
        Format exception for user display

        Args:
            exception: Exception to format

        Returns:
            User-friendly message
        """
        if isinstance(exception, ThemeFinderError):
            return exception.user_message
        else:
            return f"An error occurred: {exception}"
