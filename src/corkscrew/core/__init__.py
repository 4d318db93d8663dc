"""Core database operations layer."""

from .classifier import QueryClassifier
from .connection import DatabaseConnection
from .executor import StatementExecutor
from .registry import StatementRegistry

__all__ = [
    "DatabaseConnection",
    "QueryClassifier",
    "StatementExecutor",
    "StatementRegistry",
]
