"""
Exception classes for the ipstack client.

All exceptions inherit from IPStackError and provide structured
error information with codes, messages, and optional details.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import ApiError


class IPStackError(Exception):
    """Base exception for all ipstack client errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class APIRequestError(IPStackError):
    """Raised when an API error value has to be turned into an exception."""

    def __init__(self, error: "ApiError") -> None:
        self.error = error
        super().__init__(
            code=str(error.kind),
            message=str(error),
            details={"api_code": error.code, "info": error.info},
        )


class DecodeError(IPStackError):
    """Raised when a response body is not valid JSON or not shaped as expected."""

    pass


class UnknownErrorKindError(DecodeError):
    """Raised when an error envelope names an error kind outside the known set."""

    pass


class ConfigurationError(IPStackError):
    """Raised when client configuration is missing or invalid."""

    pass
