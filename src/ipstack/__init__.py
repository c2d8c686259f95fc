"""
ipstack - Client library for the ipstack IP geolocation API.

This package builds authenticated lookup URLs, sends them through a pluggable
HTTP transport, and decodes the API's responses into typed results or
structured API errors.
"""

__version__ = "0.1.0"

from ipstack.exceptions import (
    IPStackError,
    APIRequestError,
    DecodeError,
    UnknownErrorKindError,
    ConfigurationError,
)
from ipstack.enums import (
    ErrorKind,
    Language,
    LookupStatus,
    LogLevel,
)
from ipstack.models import (
    LookupResult,
    Location,
    LocationLanguage,
    TimeZone,
    Currency,
    Connection,
    Security,
    ApiError,
    LookupResponse,
)
from ipstack.options import (
    LookupOptions,
    ClientOption,
    with_transport,
    with_debug,
    with_logger,
)
from ipstack.logger import (
    DebugLogger,
    StructuredLogger,
    LogEntry,
    redact_url,
)
from ipstack.client import (
    IPStackClient,
    HTTPTransport,
    API_HOST,
    create_default_transport,
    decode_response,
    encode_target,
)
from ipstack.config import (
    ClientConfig,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
    build_client,
)

__all__ = [
    # Exceptions
    "IPStackError",
    "APIRequestError",
    "DecodeError",
    "UnknownErrorKindError",
    "ConfigurationError",
    # Enums
    "ErrorKind",
    "Language",
    "LookupStatus",
    "LogLevel",
    # Models
    "LookupResult",
    "Location",
    "LocationLanguage",
    "TimeZone",
    "Currency",
    "Connection",
    "Security",
    "ApiError",
    "LookupResponse",
    # Options
    "LookupOptions",
    "ClientOption",
    "with_transport",
    "with_debug",
    "with_logger",
    # Logging
    "DebugLogger",
    "StructuredLogger",
    "LogEntry",
    "redact_url",
    # Client
    "IPStackClient",
    "HTTPTransport",
    "API_HOST",
    "create_default_transport",
    "decode_response",
    "encode_target",
    # Configuration
    "ClientConfig",
    "load_config_from_env",
    "load_config_from_file",
    "save_config_to_file",
    "build_client",
]
