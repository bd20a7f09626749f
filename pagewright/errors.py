"""The single error type raised for fatal build conditions."""

from typing import Any, Optional


class BuildError(Exception):
    """A fatal, build-aborting condition.

    *message* is meant for humans; *data* carries whatever structured detail
    the raiser has at hand (a failing path, a validation error list, …).
    The underlying library exception, if any, is chained with ``raise ... from``.
    """

    def __init__(self, message: str, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data
