"""Pydantic models for configuration, statements and results."""

from .config import DatabaseConfig
from .result import ErrorState, WriteResult
from .statement import NamedStatement, ParameterBinding

__all__ = [
    "DatabaseConfig",
    "NamedStatement",
    "ParameterBinding",
    "WriteResult",
    "ErrorState",
]
