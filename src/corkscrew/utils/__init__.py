"""Utility modules for corkscrew."""

from corkscrew.utils.serialization import dumps

__all__ = ["dumps"]
