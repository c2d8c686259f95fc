"""
Request options and client option mutators.

LookupOptions maps the optional lookup parameters onto query parameters.
The ``with_*`` helpers return callables that adjust an IPStackClient at
construction time and are applied in the order given.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Union

from .enums import Language
from .exceptions import ConfigurationError
from .logger import DebugLogger

if TYPE_CHECKING:
    from .client import HTTPTransport, IPStackClient


@dataclass(frozen=True)
class LookupOptions:
    """Optional parameters for a single lookup."""

    # Comma-separated output fields, e.g. "country_code,location.capital"
    fields: Optional[str] = None
    hostname: bool = False
    security: bool = False
    language: Optional[Union[Language, str]] = None

    def __post_init__(self) -> None:
        if isinstance(self.language, str):
            try:
                object.__setattr__(self, "language", Language(self.language.lower()))
            except ValueError as e:
                raise ConfigurationError(
                    code="invalid_language",
                    message=f"Unsupported response language: {self.language}",
                    details={"supported": [lang.value for lang in Language]},
                ) from e

    def to_query_params(self) -> list[tuple[str, str]]:
        """Query parameters for the set options, unset ones omitted."""
        params = []
        if self.hostname:
            params.append(("hostname", "1"))
        if self.security:
            params.append(("security", "1"))
        if self.language is not None:
            params.append(("language", self.language.value))
        if self.fields:
            params.append(("fields", self.fields))
        return params


ClientOption = Callable[["IPStackClient"], None]


def with_transport(transport: "HTTPTransport", close_with_client: bool = False) -> ClientOption:
    """
    Use a custom transport instead of the default httpx client.

    The client only closes the transport when ``close_with_client`` is set.
    """
    def apply(client: "IPStackClient") -> None:
        client._transport = transport
        client._owns_transport = close_with_client
    return apply


def with_debug(enabled: bool) -> ClientOption:
    """Enable or disable debug logging of requests and responses."""
    def apply(client: "IPStackClient") -> None:
        client._debug = enabled
    return apply


def with_logger(logger: DebugLogger) -> ClientOption:
    """Send debug output to the given logger sink."""
    def apply(client: "IPStackClient") -> None:
        client._logger = logger
    return apply
