"""Exception hierarchy for corkscrew.

Backend failures never leak driver details through the raised exception;
use ``error_code()`` / ``error_info()`` or the log for diagnostics.
"""

from typing import Optional


class CorkscrewError(Exception):
    """Base class for all corkscrew errors."""


class ConfigurationError(CorkscrewError, ValueError):
    """Missing or invalid connection settings."""


class ConnectionError(CorkscrewError):
    """Any backend failure during connect, prepare, bind or execute."""

    def __init__(self, message: str = "Database Error"):
        super().__init__(message)


class NotFoundError(CorkscrewError, LookupError):
    """A statement name that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No statement registered under {name!r}")


class StatementNameError(ConfigurationError, NotFoundError):
    """An empty statement name."""

    def __init__(self, name: str = ""):
        self.name = name
        CorkscrewError.__init__(self, "Statement name must not be empty")


class InvalidQueryError(CorkscrewError, ValueError):
    """SQL verb does not match the requested kind."""

    def __init__(self, kind: str, query: Optional[str] = None):
        self.kind = kind
        self.query = query
        super().__init__(f"Not {kind.capitalize()} Sql")


class EmptyResultError(CorkscrewError):
    """A select executed through ``exec`` returned no rows."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Statement {name!r} returned no rows")
