"""
SiteFeed Custom Exceptions
==========================

Custom exception hierarchy for SiteFeed with error codes, context
information, and user-friendly error messages.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Feed ingestion errors (F001-F099)
    FEED_NETWORK_ERROR = "F004"
    FEED_BAD_STATUS = "F007"


class SiteFeedError(Exception):
    """Base exception for all SiteFeed errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize SiteFeed error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(SiteFeedError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for SiteFeedError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message"]
            },
        )


class FeedError(SiteFeedError):
    """Feed ingestion errors."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize feed error.

        Args:
            message: Error message
            feed_url: Feed URL that caused the error
            **kwargs: Additional arguments for SiteFeedError
        """
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_NETWORK_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Feed processing failed: {message}"
            ),
            recoverable=kwargs.get("recoverable", True),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message", "recoverable"]
            },
        )


class FeedFetchError(FeedError):
    """RSS feed fetching errors."""

    pass


class FeedStatusError(FeedFetchError):
    """The feed server answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status: int,
        reason: Optional[str] = None,
        feed_url: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        context["status"] = status
        context["reason"] = reason
        self.status = status
        self.reason = reason

        super().__init__(
            message,
            feed_url=feed_url,
            context=context,
            error_code=kwargs.pop("error_code", ErrorCode.FEED_BAD_STATUS),
            **kwargs,
        )


class FeedTransportError(FeedFetchError):
    """The request never produced a response (DNS, TLS, reset, timeout)."""

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        feed_url: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        context["detail"] = detail
        self.detail = detail

        super().__init__(
            message,
            feed_url=feed_url,
            context=context,
            error_code=kwargs.pop("error_code", ErrorCode.FEED_NETWORK_ERROR),
            **kwargs,
        )


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, SiteFeedError):
        return exception.user_message

    # Fallback for non-SiteFeed exceptions
    return "An unexpected error occurred. Please try again later."
