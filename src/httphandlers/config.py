"""
=============================================================================
CONFIGURATION
=============================================================================

Settings for the access logger, plus a helper that configures the
logging module the way the rest of the package expects.

=============================================================================
CONFIGURATION GROUPS
=============================================================================

    FORMAT
    - log_format: "common" | "combined" | "json"

    DESTINATION (when no stream is passed)
    - logger_name, log_level

    FILTERING
    - skip_paths

    Development:
        AccessLogConfig(log_format="combined", log_level="DEBUG")

    Production behind a log shipper:
        AccessLogConfig(log_format="json", skip_paths=["/health"])

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import List, Union

from .errors import ConfigError


LOG_FORMATS = ("common", "combined", "json")

_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_log_level(level: Union[int, str]) -> int:
    """
    Turn a level name ("INFO", "debug") or number into a logging level.

    Raises:
        ConfigError: If the name is not a standard level
    """
    if isinstance(level, int):
        return level

    name = level.upper()
    if name not in _LEVEL_NAMES:
        raise ConfigError(f"Invalid log level: {level!r}. Must be one of {', '.join(_LEVEL_NAMES)}.")
    return getattr(logging, name)


@dataclass
class AccessLogConfig:
    """
    Configuration for AccessLogMiddleware.

    Validation is explicit (validate()) and also runs when the middleware
    is built with AccessLogMiddleware.from_config(), so a bad value fails
    at startup instead of on the first request.
    """

    log_format: str = "common"
    """
    Line format: "common" (Apache CLF), "combined" (CLF plus referer and
    user agent) or "json" (one object per line, for aggregators).
    """

    log_level: str = "INFO"
    """Level of access lines sent through the logging module."""

    logger_name: str = "httphandlers.access"
    """
    Logger used when no output stream is given. Configure it like any
    other logger:
        logging.getLogger("httphandlers.access").addHandler(file_handler)
    """

    skip_paths: List[str] = field(default_factory=list)
    """Paths that are served but not logged (health checks are noisy)."""

    @property
    def level(self) -> int:
        return parse_log_level(self.log_level)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: On the first invalid value
        """
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(
                f"Invalid log_format: {self.log_format!r}. Must be one of {', '.join(LOG_FORMATS)}."
            )

        parse_log_level(self.log_level)

        if not self.logger_name:
            raise ConfigError("logger_name must not be empty")

        for path in self.skip_paths:
            if not path.startswith("/"):
                raise ConfigError(f"skip_paths entries must start with '/': {path!r}")


def setup_logging(level: Union[int, str] = "INFO") -> None:
    """
    Configure the root logger and the httphandlers logger.

    Access lines sent through the logging module get the usual prefix:

        2026-10-17 12:00:00 [INFO] httphandlers.access: 10.0.0.1 - - [...]
    """
    resolved = parse_log_level(level)

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httphandlers").setLevel(resolved)
