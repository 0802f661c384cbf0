"""
Exceptions raised by httphandlers.

Neither the method dispatcher nor the access logger is an error
boundary: exceptions raised by user handlers pass through untouched.
The classes here only cover misuse of the package itself.
"""


class HandlersError(Exception):
    """Base class for all httphandlers errors."""


class HeadersSentError(HandlersError, RuntimeError):
    """
    Raised when response headers are modified after they were committed.

    Headers are committed by the first write_header() call or by the
    first body write, whichever comes first. After that point the status
    line and headers are on their way to the client and can no longer
    change.
    """

    def __init__(self, name: str):
        super().__init__(f"cannot modify header {name!r}: headers already sent")
        self.header = name


class ConfigError(HandlersError, ValueError):
    """Raised when a configuration value is invalid."""
