"""
Property-based tests for the structured logger.

Uses Hypothesis to check credential masking in log data, access key
redaction in URLs, and both output formats.
"""

import inspect
import json
from io import StringIO

import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

from ipstack.enums import LogLevel
from ipstack.logger import DebugLogger, StructuredLogger, redact_url
from ipstack.options import with_logger


@st.composite
def access_key_strategy(draw) -> str:
    """Generate access keys that cannot collide with log boilerplate."""
    return draw(st.text(
        alphabet=st.sampled_from("ABCDEFGHJKLMNPQRSTUVWXYZ"),
        min_size=16,
        max_size=40,
    ))


@st.composite
def non_sensitive_key_strategy(draw) -> str:
    """Generate keys that are NOT sensitive."""
    key = draw(st.text(
        alphabet=st.sampled_from("bcdfghjmpqrvwxyz_"),
        min_size=1,
        max_size=20,
    ))
    assume(not key.endswith("url"))
    return key


class TestRedactUrl:
    @given(access_key=access_key_strategy(), address=st.sampled_from(
        ["8.8.8.8", "2001:db8::1", "example.com"]
    ))
    @settings(max_examples=50)
    def test_access_key_replaced(self, access_key: str, address: str) -> None:
        url = f"http://api.ipstack.com/{address}?access_key={access_key}&hostname=1"

        redacted = redact_url(url)

        assert access_key not in redacted
        assert "access_key=hidden" in redacted
        assert "hostname=1" in redacted
        assert f"/{address}?" in redacted

    def test_url_without_key_unchanged(self) -> None:
        url = "http://api.ipstack.com/8.8.8.8?language=de"

        assert redact_url(url) == url


class TestMasking:
    @given(
        secret=st.text(min_size=1, max_size=30),
        key=st.sampled_from(["access_key", "api_key", "token", "Authorization", "client_secret"]),
    )
    @settings(max_examples=100)
    def test_sensitive_keys_masked(self, secret: str, key: str) -> None:
        logger = StructuredLogger(output_stream=StringIO())

        masked = logger.mask_sensitive_data({key: secret, "nested": {key: secret}})

        assert masked[key] == StructuredLogger.MASK_VALUE
        assert masked["nested"][key] == StructuredLogger.MASK_VALUE

    @given(data=st.dictionaries(
        keys=non_sensitive_key_strategy(),
        values=st.one_of(st.text(max_size=20), st.integers(), st.booleans(), st.none()),
        max_size=5,
    ))
    @settings(max_examples=100)
    def test_other_keys_untouched(self, data: dict) -> None:
        logger = StructuredLogger(output_stream=StringIO())

        assert logger.mask_sensitive_data(data) == data

    def test_url_values_redacted(self) -> None:
        logger = StructuredLogger(output_stream=StringIO())

        masked = logger.mask_sensitive_data({
            "request_url": "http://api.ipstack.com/8.8.8.8?access_key=SECRETKEY",
        })

        assert masked["request_url"] == "http://api.ipstack.com/8.8.8.8?access_key=hidden"


class TestOutput:
    def test_json_line(self) -> None:
        stream = StringIO()
        logger = StructuredLogger(output_format="json", output_stream=stream)

        logger.log(LogLevel.INFO, "ipstack.client", "HTTP request", {"status_code": 200})

        line = json.loads(stream.getvalue().strip())
        assert line["level"] == "info"
        assert line["component"] == "ipstack.client"
        assert line["data"] == {"status_code": 200}

    def test_text_line(self) -> None:
        stream = StringIO()
        logger = StructuredLogger(output_format="text", output_stream=stream)

        entry = logger.log(LogLevel.WARN, "cli", "careful")

        assert stream.getvalue().strip() == f"[{entry.timestamp}] WARN [cli] careful"

    def test_both_formats(self) -> None:
        stream = StringIO()
        logger = StructuredLogger(output_format="both", output_stream=stream)

        logger.log(LogLevel.DEBUG, "c", "m")

        assert len(stream.getvalue().splitlines()) == 2

    def test_level_filter(self) -> None:
        stream = StringIO()
        logger = StructuredLogger(output_stream=stream, level=LogLevel.WARN)

        assert logger.log(LogLevel.DEBUG, "c", "dropped") is None
        assert logger.log(LogLevel.ERROR, "c", "kept") is not None
        assert [entry.message for entry in logger.entries] == ["kept"]

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError):
            StructuredLogger(output_format="xml")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(StructuredLogger(), DebugLogger)


class TestRetention:
    @given(max_entries=st.integers(min_value=0, max_value=20), count=st.integers(min_value=0, max_value=60))
    @settings(max_examples=50)
    def test_only_recent_entries_kept(self, max_entries: int, count: int) -> None:
        logger = StructuredLogger(output_stream=StringIO(), max_entries=max_entries)

        for i in range(count):
            logger.log(LogLevel.DEBUG, "c", f"message {i}")

        kept = [entry.message for entry in logger.entries]
        assert len(kept) == min(count, max_entries)
        assert kept == [f"message {i}" for i in range(count - len(kept), count)]

    def test_default_bound(self) -> None:
        logger = StructuredLogger(output_stream=StringIO())

        for _ in range(StructuredLogger.DEFAULT_MAX_ENTRIES * 3):
            logger.log(LogLevel.DEBUG, "c", "m")

        assert len(logger.entries) == StructuredLogger.DEFAULT_MAX_ENTRIES

    def test_negative_bound_rejected(self) -> None:
        with pytest.raises(ValueError):
            StructuredLogger(max_entries=-1)


def test_with_logger_accepts_debug_logger() -> None:
    annotation = inspect.signature(with_logger).parameters["logger"].annotation

    assert annotation is DebugLogger
