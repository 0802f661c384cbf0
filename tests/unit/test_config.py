"""
Unit tests for configuration.
"""

import io
import logging

import pytest

from httphandlers.config import AccessLogConfig, parse_log_level, setup_logging
from httphandlers.errors import ConfigError, HandlersError
from httphandlers.http import HTTPRequest, serve
from httphandlers.middleware import AccessLogMiddleware


class TestAccessLogConfig:
    """Tests for AccessLogConfig validation."""

    def test_defaults_are_valid(self):
        config = AccessLogConfig()
        config.validate()
        assert config.log_format == "common"
        assert config.level == logging.INFO

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"log_format": "apache"},
            {"log_level": "LOUD"},
            {"logger_name": ""},
            {"skip_paths": ["health"]},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            AccessLogConfig(**kwargs).validate()

    def test_config_error_is_value_error(self):
        """Callers catching ValueError still see config errors."""
        with pytest.raises(ValueError):
            AccessLogConfig(log_format="xml").validate()
        assert issubclass(ConfigError, HandlersError)


def test_parse_log_level():
    assert parse_log_level("debug") == logging.DEBUG
    assert parse_log_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ConfigError):
        parse_log_level("verbose")


def test_middleware_from_config(ok_handler):
    buf = io.StringIO()
    config = AccessLogConfig(log_format="combined", skip_paths=["/health"])
    mw = AccessLogMiddleware.from_config(config, out=buf)

    serve(mw.wrap(ok_handler), HTTPRequest("GET", "/health"))
    serve(mw.wrap(ok_handler), HTTPRequest("GET", "/", remote_addr="10.0.0.1"))

    assert buf.getvalue().endswith('" 200 3 "" ""\n')
    assert buf.getvalue().count("\n") == 1


def test_from_config_validates():
    with pytest.raises(ConfigError):
        AccessLogMiddleware.from_config(AccessLogConfig(log_level="nope"))


def test_setup_logging_sets_package_level():
    package_logger = logging.getLogger("httphandlers")
    previous = package_logger.level
    try:
        setup_logging("DEBUG")
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(previous)
