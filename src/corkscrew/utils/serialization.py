"""JSON serialization for diagnostic log records, using orjson.

orjson handles datetime, date, time, UUID and pydantic-free dicts natively.
Bound parameters and driver messages can carry a few more types; those are
handled here so a log line never fails to render.
"""

import base64
import datetime
import decimal
from typing import Any

import orjson


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation
    """
    if isinstance(obj, decimal.Decimal):
        return str(obj)

    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    # bytes/bytearray/memoryview - try UTF-8 decode, fall back to base64
    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)

    # Anything else (driver objects, clauses) is logged by its repr
    return repr(obj)


def dumps(obj: Any) -> str:
    """
    Serialize object to a JSON string using orjson.

    Args:
        obj: Object to serialize

    Returns:
        JSON string
    """
    return orjson.dumps(
        obj, default=_default_handler, option=orjson.OPT_NON_STR_KEYS
    ).decode("utf-8")
