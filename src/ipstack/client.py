"""
ipstack API client.

This module provides a synchronous client for the ipstack geolocation API:
URL building with the embedded access key, a single GET per lookup, and
disambiguation of the API's shared success/error response shape.
"""

import ipaddress
import json
from typing import Optional, Protocol, runtime_checkable
from urllib.parse import quote, urlencode

import httpx
import idna

from .enums import ErrorKind, LogLevel
from .exceptions import APIRequestError, DecodeError
from .logger import ACCESS_KEY_PARAM, DebugLogger, StructuredLogger, redact_url
from .models import ApiError, LookupResponse, LookupResult
from .options import ClientOption, LookupOptions


API_HOST = "api.ipstack.com"

# Per-phase timeouts for the default transport
DEFAULT_TIMEOUT_SECONDS = 10.0


@runtime_checkable
class HTTPTransport(Protocol):
    """Anything that can send an httpx request and return its response."""

    def send(self, request: httpx.Request) -> httpx.Response:
        ...


def create_default_transport(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.Client:
    """
    Create the default transport.

    Redirects are not followed; a redirect response is handed back as is.
    """
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        follow_redirects=False,
    )


def decode_response(body: bytes, http_status_code: int = 0) -> LookupResponse:
    """
    Decode a lookup response body into a result or an API error.

    The API uses one JSON shape for both outcomes. Only error responses
    carry ``"success": false``; successful ones omit the flag.

    Args:
        body: The raw response body
        http_status_code: HTTP status of the response, kept for reference

    Returns:
        LookupResponse holding either a LookupResult or an ApiError

    Raises:
        DecodeError: If the body is not a JSON object or is malformed
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(
            code="invalid_json",
            message=f"Response body is not valid JSON: {e}",
            details={"http_status_code": http_status_code},
        ) from e

    if not isinstance(data, dict):
        raise DecodeError(
            code="unexpected_shape",
            message=f"Response body must be a JSON object, got {type(data).__name__}",
            details={"http_status_code": http_status_code},
        )

    success = data.get("success")
    if success is not None and not isinstance(success, bool):
        raise DecodeError(
            code="invalid_field_type",
            message="Field 'success' must be a boolean",
            details={"field": "success", "value": success},
        )

    if success is False:
        return LookupResponse.failure(ApiError.from_dict(data), http_status_code)

    return LookupResponse.success(LookupResult.from_dict(data), http_status_code)


def encode_target(address: str) -> str:
    """
    Escape a lookup target for use as the request path.

    IP literals pass through; non-ASCII domain names are IDNA-encoded first.
    """
    try:
        ipaddress.ip_address(address)
    except ValueError:
        if not address.isascii():
            try:
                address = idna.encode(address, uts46=True).decode("ascii")
            except idna.IDNAError:
                # Leave it to the API to reject; percent-escaping still applies.
                pass
    return quote(address, safe=":")


class IPStackClient:
    """
    Client for the ipstack geolocation API.

    Example:
        >>> client = IPStackClient("my-key", with_debug(True))
        >>> response = client.lookup("134.201.250.155", LookupOptions(security=True))
        >>> if response.ok:
        ...     print(response.result.country_name)

    Free plans only have plain HTTP access; pass ``secure=True`` on paid plans.
    """

    COMPONENT = "ipstack.client"

    def __init__(
        self,
        access_key: str,
        *options: ClientOption,
        secure: bool = False,
    ) -> None:
        """
        Initialize the client.

        Args:
            access_key: ipstack API access key
            *options: Option mutators such as with_transport or with_debug
            secure: Use https (requires a paid plan)

        Raises:
            APIRequestError: With kind missing_access_key if the key is empty
        """
        if not access_key:
            raise APIRequestError(
                ApiError.local(ErrorKind.MISSING_ACCESS_KEY, "No API Key was specified.")
            )

        scheme = "https" if secure else "http"
        self._base_url = f"{scheme}://{API_HOST}"
        self._base_params: tuple[tuple[str, str], ...] = ((ACCESS_KEY_PARAM, access_key),)

        self._transport: Optional[HTTPTransport] = None
        self._owns_transport = True
        self._debug = False
        self._logger: Optional[DebugLogger] = None

        for option in options:
            option(self)

        if self._transport is None:
            self._transport = create_default_transport()
            self._owns_transport = True
        if self._debug and self._logger is None:
            self._logger = StructuredLogger()

    @property
    def base_url(self) -> str:
        """Base URL without the access key."""
        return self._base_url

    @property
    def debug(self) -> bool:
        return self._debug

    def __enter__(self) -> "IPStackClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if the client owns it."""
        close = getattr(self._transport, "close", None)
        if self._owns_transport and close is not None:
            close()

    def build_url(self, address: str, options: Optional[LookupOptions] = None) -> str:
        """
        Build the request URL for a lookup.

        Args:
            address: IPv4/IPv6 address or domain name
            options: Optional lookup parameters

        Returns:
            Full request URL including the access key
        """
        params = list(self._base_params)
        if options is not None:
            params.extend(options.to_query_params())
        return f"{self._base_url}/{encode_target(address)}?{urlencode(params)}"

    def lookup(self, address: str, *options: LookupOptions) -> LookupResponse:
        """
        Look up geolocation data for an IP address or domain name.

        Only the first options object is used; any further ones are ignored.

        Args:
            address: IPv4/IPv6 address or a domain name the API resolves
            *options: Optional lookup parameters

        Returns:
            LookupResponse with either the result or the API-reported error

        Raises:
            DecodeError: If the response body is malformed
            httpx.HTTPError: On transport failures (DNS, connect, TLS, timeout)
        """
        url = self.build_url(address, options[0] if options else None)
        request = httpx.Request("GET", url)

        self._debug_log("HTTP request", {"url": redact_url(url)})

        response = self._transport.send(request)
        try:
            self._debug_log(
                "HTTP response",
                {
                    "status_code": response.status_code,
                    "headers": dict(response.headers),
                },
            )
            body = response.read()
        finally:
            response.close()

        return decode_response(body, response.status_code)

    def bulk_lookup(self, addresses: list[str], *options: LookupOptions) -> list[LookupResult]:
        """
        Look up up to 50 addresses in one call.

        Not implemented against the API yet: always returns an empty list
        without sending a request.
        """
        self._debug_log(
            "Bulk lookup is not implemented; returning no results",
            {"address_count": len(addresses)},
        )
        return []

    def requester_lookup(self, *options: LookupOptions) -> LookupResult:
        """
        Look up the address the request originates from.

        Not implemented against the API yet: always returns
        LookupResult.empty() without sending a request.
        """
        self._debug_log("Requester lookup is not implemented; returning empty result")
        return LookupResult.empty()

    def _debug_log(self, message: str, data: Optional[dict] = None) -> None:
        if self._debug and self._logger is not None:
            self._logger.log(LogLevel.DEBUG, self.COMPONENT, message, data)
