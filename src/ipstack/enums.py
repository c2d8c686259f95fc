"""
Enumeration types for the ipstack client.

These enums provide type-safe constants for API error kinds, response
languages, lookup outcomes and logging levels.
"""

from enum import Enum

from .exceptions import UnknownErrorKindError


class ErrorKind(Enum):
    """Error kinds reported by the ipstack API in the ``error.type`` field."""

    NOT_FOUND = "404_not_found"
    MISSING_ACCESS_KEY = "missing_access_key"
    INVALID_ACCESS_KEY = "invalid_access_key"
    INACTIVE_USER = "inactive_user"
    INVALID_API_FUNCTION = "invalid_api_function"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    FUNCTION_ACCESS_RESTRICTED = "function_access_restricted"
    HTTPS_ACCESS_RESTRICTED = "https_access_restricted"
    INVALID_FIELDS = "invalid_fields"
    TOO_MANY_IPS = "too_many_ips"
    BATCH_NOT_SUPPORTED_ON_PLAN = "batch_not_supported_on_plan"

    @classmethod
    def parse(cls, text: str) -> "ErrorKind":
        """
        Parse a symbolic error kind.

        Args:
            text: The ``type`` value from an error envelope

        Returns:
            The matching ErrorKind

        Raises:
            UnknownErrorKindError: If the text is not a recognised kind
        """
        if isinstance(text, str):
            if text in _ALIASES:
                return _ALIASES[text]
            try:
                return cls(text)
            except ValueError:
                pass
        raise UnknownErrorKindError(
            code="unknown_error_kind",
            message=f"unknown error kind: {text}",
            details={"value": text},
        )

    @property
    def code(self) -> int:
        """Numeric code documented for this kind."""
        return _ERROR_CODES[self]

    def __str__(self) -> str:
        return self.value


# Several kinds share a code on the API side; the kind string is the
# discriminator, never the number.
_ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.MISSING_ACCESS_KEY: 101,
    ErrorKind.INVALID_ACCESS_KEY: 101,
    ErrorKind.INACTIVE_USER: 102,
    ErrorKind.INVALID_API_FUNCTION: 103,
    ErrorKind.USAGE_LIMIT_REACHED: 104,
    ErrorKind.FUNCTION_ACCESS_RESTRICTED: 105,
    ErrorKind.HTTPS_ACCESS_RESTRICTED: 105,
    ErrorKind.INVALID_FIELDS: 301,
    ErrorKind.TOO_MANY_IPS: 302,
    ErrorKind.BATCH_NOT_SUPPORTED_ON_PLAN: 303,
}

_ALIASES: dict[str, ErrorKind] = {
    "not_found": ErrorKind.NOT_FOUND,
}


class Language(Enum):
    """Response languages supported by the ``language`` query parameter."""

    ENGLISH = "en"
    GERMAN = "de"
    SPANISH = "es"
    FRENCH = "fr"
    JAPANESE = "ja"
    RUSSIAN = "ru"
    CHINESE = "zh"
    PORTUGUESE_BRAZIL = "pt-br"

    def __str__(self) -> str:
        return self.value


class LookupStatus(Enum):
    """Outcome of a lookup once the response body has been decoded."""

    SUCCESS = "success"
    FAILURE = "failure"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
