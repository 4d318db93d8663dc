"""
corkscrew - a small relational database facade

Opens one connection, caches named prepared statements, binds typed
parameters and runs each prepared statement in its own transaction.
"""

__version__ = "1.0.0"

from .application import Corkscrew
from .core.classifier import DELETE, INSERT, SELECT, UPDATE
from .exceptions import (
    ConfigurationError,
    ConnectionError,
    CorkscrewError,
    EmptyResultError,
    InvalidQueryError,
    NotFoundError,
    StatementNameError,
)
from .models.config import DatabaseConfig
from .models.result import WriteResult
from .models.statement import NamedStatement

__all__ = [
    "Corkscrew",
    "DatabaseConfig",
    "NamedStatement",
    "WriteResult",
    "SELECT",
    "INSERT",
    "UPDATE",
    "DELETE",
    "CorkscrewError",
    "ConfigurationError",
    "ConnectionError",
    "NotFoundError",
    "StatementNameError",
    "InvalidQueryError",
    "EmptyResultError",
]
