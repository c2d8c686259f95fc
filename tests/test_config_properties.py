"""
Property-based tests for the configuration module.

Uses Hypothesis to check that configuration survives a save/load cycle and
that environment loading and validation behave as documented.
"""

import json
import os
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ipstack.client import IPStackClient
from ipstack.config import (
    ClientConfig,
    build_client,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from ipstack.exceptions import ConfigurationError


@st.composite
def client_config_strategy(draw) -> ClientConfig:
    """Generate valid ClientConfig objects."""
    return ClientConfig(
        access_key=draw(st.text(
            alphabet=st.sampled_from("abcdef0123456789"),
            min_size=32,
            max_size=32,
        )),
        secure=draw(st.booleans()),
        debug=draw(st.booleans()),
        timeout_seconds=draw(st.floats(min_value=0.5, max_value=120.0)),
        log_format=draw(st.sampled_from(["json", "text", "both"])),
    )


class TestConfigFile:
    @given(config=client_config_strategy())
    @settings(max_examples=50)
    def test_save_load_round_trip(self, config: ClientConfig) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.json"
            save_config_to_file(config, path)

            assert load_config_from_file(path) == config

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_file(tmp_path / "absent.json")

        assert exc_info.value.code == "config_not_found"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_file(path)

        assert exc_info.value.code == "invalid_config"

    @pytest.mark.parametrize("raw,expected", [
        ("false", False),
        ("0", False),
        ("true", True),
        ("yes", True),
    ])
    def test_string_flags_coerced(self, tmp_path: Path, raw: str, expected: bool) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"access_key": "key", "secure": raw, "debug": raw}),
            encoding="utf-8",
        )

        config = load_config_from_file(path)

        assert config.secure is expected
        assert config.debug is expected

    def test_non_boolean_flag_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"access_key": "key", "secure": 1}', encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_file(path)

        assert exc_info.value.code == "invalid_config"

    def test_missing_access_key_field(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"secure": true}', encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config_from_file(path)


class TestConfigEnv:
    def test_reads_prefixed_variables(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("IPSTACK_ACCESS_KEY", " abc123 ")
        monkeypatch.setenv("IPSTACK_SECURE", "true")
        monkeypatch.setenv("IPSTACK_DEBUG", "1")
        monkeypatch.setenv("IPSTACK_TIMEOUT", "5")
        monkeypatch.setenv("IPSTACK_LOG_FORMAT", "json")

        config = load_config_from_env(tmp_path / "missing.env")

        assert config == ClientConfig(
            access_key="abc123",
            secure=True,
            debug=True,
            timeout_seconds=5.0,
            log_format="json",
        )

    def test_dotenv_file(self, monkeypatch, tmp_path: Path) -> None:
        for name in ("IPSTACK_ACCESS_KEY", "IPSTACK_SECURE", "IPSTACK_DEBUG",
                     "IPSTACK_TIMEOUT", "IPSTACK_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("IPSTACK_ACCESS_KEY=fromfile\nIPSTACK_SECURE=0\n", encoding="utf-8")

        try:
            config = load_config_from_env(env_file)
        finally:
            os.environ.pop("IPSTACK_ACCESS_KEY", None)
            os.environ.pop("IPSTACK_SECURE", None)

        assert config.access_key == "fromfile"
        assert config.secure is False

    def test_dotenv_in_working_directory(self, monkeypatch, tmp_path: Path) -> None:
        for name in ("IPSTACK_ACCESS_KEY", "IPSTACK_SECURE", "IPSTACK_DEBUG",
                     "IPSTACK_TIMEOUT", "IPSTACK_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        (tmp_path / ".env").write_text("IPSTACK_ACCESS_KEY=fromcwd\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        try:
            config = load_config_from_env()
        finally:
            os.environ.pop("IPSTACK_ACCESS_KEY", None)

        assert config.access_key == "fromcwd"

    def test_bad_timeout(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("IPSTACK_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError):
            load_config_from_env(tmp_path / "missing.env")


class TestValidation:
    @pytest.mark.parametrize("overrides,code", [
        ({"access_key": ""}, "missing_access_key"),
        ({"timeout_seconds": 0}, "invalid_timeout"),
        ({"log_format": "xml"}, "invalid_log_format"),
    ])
    def test_invalid_values(self, overrides: dict, code: str) -> None:
        config = ClientConfig(**dict({"access_key": "key"}, **overrides))

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.code == code

    def test_build_client(self) -> None:
        config = ClientConfig(access_key="key", secure=True, debug=True)

        with build_client(config) as client:
            assert isinstance(client, IPStackClient)
            assert client.base_url == "https://api.ipstack.com"
            assert client.debug is True
