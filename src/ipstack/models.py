"""
Data models for the ipstack client.

This module defines the lookup result returned by the API, the optional
plan-gated modules, the API error envelope and the decoded lookup response.

Scalars missing from a payload (or sent as ``null``) decode to their zero
value. A value of the wrong JSON type is rejected with DecodeError.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from .enums import ErrorKind, LookupStatus
from .exceptions import APIRequestError, DecodeError


_ZERO_VALUES: dict[type, Any] = {str: "", int: 0, float: 0.0, bool: False}


def _get(data: dict, key: str, expected: type) -> Any:
    """Read a scalar field, applying zero-value defaults and type checks."""
    value = data.get(key)
    if value is None:
        return _ZERO_VALUES[expected]

    if expected is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        value = float(value) if ok else value
    elif expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)

    if not ok:
        raise DecodeError(
            code="invalid_field_type",
            message=f"Field {key!r} must be {expected.__name__}, got {type(value).__name__}",
            details={"field": key, "value": value},
        )
    return value


def _get_object(data: dict, key: str) -> Optional[dict]:
    """Read a nested object; None when the key is missing or null."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(
            code="invalid_field_type",
            message=f"Field {key!r} must be an object, got {type(value).__name__}",
            details={"field": key},
        )
    return value


def _get_list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(
            code="invalid_field_type",
            message=f"Field {key!r} must be an array, got {type(value).__name__}",
            details={"field": key},
        )
    return value


@dataclass(frozen=True)
class LocationLanguage:
    """A language spoken in the located country."""

    code: str = ""
    name: str = ""
    native: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "LocationLanguage":
        return cls(
            code=_get(data, "code", str),
            name=_get(data, "name", str),
            native=_get(data, "native", str),
        )


@dataclass(frozen=True)
class Location:
    """Country-level details attached to every lookup."""

    geoname_id: int = 0
    capital: str = ""
    languages: tuple[LocationLanguage, ...] = ()
    country_flag: str = ""
    country_flag_emoji: str = ""
    country_flag_emoji_unicode: str = ""
    calling_code: str = ""
    is_eu: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        languages = []
        for item in _get_list(data, "languages"):
            if not isinstance(item, dict):
                raise DecodeError(
                    code="invalid_field_type",
                    message="Entries of 'languages' must be objects",
                    details={"field": "languages"},
                )
            languages.append(LocationLanguage.from_dict(item))

        return cls(
            geoname_id=_get(data, "geoname_id", int),
            capital=_get(data, "capital", str),
            languages=tuple(languages),
            country_flag=_get(data, "country_flag", str),
            country_flag_emoji=_get(data, "country_flag_emoji", str),
            country_flag_emoji_unicode=_get(data, "country_flag_emoji_unicode", str),
            calling_code=_get(data, "calling_code", str),
            is_eu=_get(data, "is_eu", bool),
        )


@dataclass(frozen=True)
class TimeZone:
    """Time zone module."""

    id: str = ""
    current_time: str = ""
    gmt_offset: int = 0
    code: str = ""
    is_daylight_saving: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "TimeZone":
        return cls(
            id=_get(data, "id", str),
            current_time=_get(data, "current_time", str),
            gmt_offset=_get(data, "gmt_offset", int),
            code=_get(data, "code", str),
            is_daylight_saving=_get(data, "is_daylight_saving", bool),
        )


@dataclass(frozen=True)
class Currency:
    """Currency module."""

    code: str = ""
    name: str = ""
    plural: str = ""
    symbol: str = ""
    symbol_native: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Currency":
        return cls(
            code=_get(data, "code", str),
            name=_get(data, "name", str),
            plural=_get(data, "plural", str),
            symbol=_get(data, "symbol", str),
            symbol_native=_get(data, "symbol_native", str),
        )


@dataclass(frozen=True)
class Connection:
    """Connection module (autonomous system and ISP)."""

    asn: int = 0
    isp: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Connection":
        return cls(
            asn=_get(data, "asn", int),
            isp=_get(data, "isp", str),
        )


@dataclass(frozen=True)
class Security:
    """
    Security module.

    ``proxy_type`` and ``crawler_type`` are passed through untouched; the API
    sends either null or a free-form string for them.
    """

    is_proxy: bool = False
    proxy_type: Any = None
    is_crawler: bool = False
    crawler_name: str = ""
    crawler_type: Any = None
    is_tor: bool = False
    threat_level: str = ""
    threat_types: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Security":
        threat_types = _get_list(data, "threat_types")
        if not all(isinstance(t, str) for t in threat_types):
            raise DecodeError(
                code="invalid_field_type",
                message="Entries of 'threat_types' must be strings",
                details={"field": "threat_types"},
            )

        return cls(
            is_proxy=_get(data, "is_proxy", bool),
            proxy_type=data.get("proxy_type"),
            is_crawler=_get(data, "is_crawler", bool),
            crawler_name=_get(data, "crawler_name", str),
            crawler_type=data.get("crawler_type"),
            is_tor=_get(data, "is_tor", bool),
            threat_level=_get(data, "threat_level", str),
            threat_types=tuple(threat_types),
        )


@dataclass(frozen=True)
class LookupResult:
    """
    Geolocation data for one lookup target.

    The time zone, currency, connection and security modules depend on the
    subscription plan (security also on the ``security`` request flag) and
    are None when the payload does not include them.
    """

    ip: str = ""
    hostname: str = ""
    type: str = ""
    continent_code: str = ""
    continent_name: str = ""
    country_code: str = ""
    country_name: str = ""
    region_code: str = ""
    region_name: str = ""
    city: str = ""
    zip: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    location: Location = field(default_factory=Location)

    time_zone: Optional[TimeZone] = None
    currency: Optional[Currency] = None
    connection: Optional[Connection] = None
    security: Optional[Security] = None

    @classmethod
    def empty(cls) -> "LookupResult":
        """Zero-value result."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> "LookupResult":
        """
        Build a result from a decoded success payload.

        Args:
            data: The JSON object returned by the API

        Returns:
            The populated LookupResult

        Raises:
            DecodeError: If a field has the wrong JSON type
        """
        location = _get_object(data, "location")
        time_zone = _get_object(data, "time_zone")
        currency = _get_object(data, "currency")
        connection = _get_object(data, "connection")
        security = _get_object(data, "security")

        return cls(
            ip=_get(data, "ip", str),
            hostname=_get(data, "hostname", str),
            type=_get(data, "type", str),
            continent_code=_get(data, "continent_code", str),
            continent_name=_get(data, "continent_name", str),
            country_code=_get(data, "country_code", str),
            country_name=_get(data, "country_name", str),
            region_code=_get(data, "region_code", str),
            region_name=_get(data, "region_name", str),
            city=_get(data, "city", str),
            zip=_get(data, "zip", str),
            latitude=_get(data, "latitude", float),
            longitude=_get(data, "longitude", float),
            location=Location.from_dict(location) if location is not None else Location(),
            time_zone=TimeZone.from_dict(time_zone) if time_zone is not None else None,
            currency=Currency.from_dict(currency) if currency is not None else None,
            connection=Connection.from_dict(connection) if connection is not None else None,
            security=Security.from_dict(security) if security is not None else None,
        )

    def to_dict(self) -> dict:
        """Serialise using the API's field names; absent modules are omitted."""
        data = asdict(self)
        for module in ("time_zone", "currency", "connection", "security"):
            if data[module] is None:
                del data[module]
        data["location"]["languages"] = list(data["location"]["languages"])
        if "security" in data:
            data["security"]["threat_types"] = list(data["security"]["threat_types"])
        return data


@dataclass(frozen=True)
class ApiError:
    """
    Error envelope reported by the API.

    ``success`` is None when the payload omits the flag. The detail fields
    only carry meaning when ``success`` is explicitly False.
    """

    success: Optional[bool]
    code: int
    kind: ErrorKind
    info: str

    @classmethod
    def local(cls, kind: ErrorKind, info: str) -> "ApiError":
        """Build an error without a server round trip, using the documented code."""
        return cls(success=False, code=kind.code, kind=kind, info=info)

    @classmethod
    def from_dict(cls, data: dict) -> "ApiError":
        """
        Build an error from a payload whose ``success`` flag is False.

        Raises:
            DecodeError: If the ``error`` object is missing or malformed
            UnknownErrorKindError: If ``error.type`` is not a known kind
        """
        detail = _get_object(data, "error")
        if detail is None:
            raise DecodeError(
                code="missing_error_detail",
                message="Error response carries no 'error' object",
            )

        return cls(
            success=data.get("success"),
            code=_get(detail, "code", int),
            kind=ErrorKind.parse(detail.get("type")),
            info=_get(detail, "info", str),
        )

    def __str__(self) -> str:
        return f"{self.code}: {self.info}"


@dataclass(frozen=True)
class LookupResponse:
    """Decoded lookup outcome: either a result or an API error, never both."""

    status: LookupStatus
    result: Optional[LookupResult] = None
    error: Optional[ApiError] = None
    http_status_code: int = 0

    @classmethod
    def success(cls, result: LookupResult, http_status_code: int = 0) -> "LookupResponse":
        return cls(
            status=LookupStatus.SUCCESS,
            result=result,
            http_status_code=http_status_code,
        )

    @classmethod
    def failure(cls, error: ApiError, http_status_code: int = 0) -> "LookupResponse":
        return cls(
            status=LookupStatus.FAILURE,
            error=error,
            http_status_code=http_status_code,
        )

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.SUCCESS

    def unwrap(self) -> LookupResult:
        """
        Return the result, raising for API-reported failures.

        Raises:
            APIRequestError: If the API reported an error
        """
        if self.error is not None:
            raise APIRequestError(self.error)
        return self.result
