"""Named prepared-statement registry."""

import decimal
import logging
import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy import Integer, String, bindparam, text

from corkscrew.core.connection import DatabaseConnection
from corkscrew.exceptions import NotFoundError, StatementNameError
from corkscrew.models.statement import (
    PARAM_INT,
    PARAM_STR,
    NamedStatement,
    ParameterBinding,
)

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")

# Optional sign, digits with optional fraction (or a bare fraction), optional exponent
_NUMERIC_STRING = re.compile(
    r"^\s*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$"
)


def is_numeric(value: Any) -> bool:
    """Check if a value is a number or a numeric string."""
    if isinstance(value, (int, float, decimal.Decimal)):
        return decimal.Decimal(value).is_finite()
    if isinstance(value, str):
        return bool(_DIGITS.fullmatch(value)) or bool(_NUMERIC_STRING.match(value))
    return False


def coerce_param(placeholder: str, value: Any) -> ParameterBinding:
    """
    Decide the bound type and value for one parameter.

    Digit strings and other numeric values bind as integers (fractions are
    truncated toward zero); everything else binds as a string. None binds as
    NULL.
    """
    if value is not None and (_DIGITS.fullmatch(str(value)) or is_numeric(value)):
        number = value.strip() if isinstance(value, str) else value
        return ParameterBinding(
            placeholder=placeholder,
            value=int(decimal.Decimal(number)),
            param_type=PARAM_INT,
        )

    return ParameterBinding(
        placeholder=placeholder,
        value=None if value is None else str(value),
        param_type=PARAM_STR,
    )


class StatementRegistry:
    """Maps caller-chosen names to prepared statements on one connection."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize the registry.

        Args:
            connection: Connection the statements are compiled for
        """
        self.connection = connection
        self._statements: dict[str, NamedStatement] = {}

    def prepare(self, name: str, sql: str) -> NamedStatement:
        """
        Compile ``sql`` and store it under ``name``, replacing any previous one.

        Args:
            name: Registry key
            sql: SQL text with ``:name`` placeholders

        Returns:
            The new statement

        Raises:
            ConnectionError: If the statement cannot be compiled
        """
        if not name:
            raise StatementNameError(name)

        with self.connection.guard("prepare", sql=sql):
            clause = text(sql)
            clause.compile(dialect=self.connection.connection.dialect)

        if name in self._statements:
            logger.debug(f"Replacing prepared statement {name!r}")

        statement = NamedStatement(name=name, sql=sql, clause=clause)
        self._statements[name] = statement
        logger.debug(f"Prepared statement {name!r}: {sql}")
        return statement

    def get(self, name: str) -> NamedStatement:
        """
        Look up a prepared statement.

        Raises:
            StatementNameError: If name is empty
            NotFoundError: If nothing is registered under name
        """
        if not name:
            raise StatementNameError(name)

        statement = self._statements.get(name)
        if statement is None:
            raise NotFoundError(name)
        return statement

    def bind(self, name: str, params: Mapping[str, Any]) -> NamedStatement:
        """
        Bind values to a statement's placeholders.

        Bindings are applied in the mapping's order; binding a placeholder
        again replaces its value.

        Args:
            name: Registry key
            params: Placeholder name (with or without ":") to value

        Returns:
            The bound statement

        Raises:
            StatementNameError: If name is empty
            NotFoundError: If nothing is registered under name
            ConnectionError: If a placeholder does not exist in the SQL
        """
        statement = self.get(name)

        clause = statement.clause
        bindings = dict(statement.bindings)
        with self.connection.guard("bind", sql=statement.sql, params=params):
            for key, value in params.items():
                binding = coerce_param(key.lstrip(":"), value)
                sql_type = Integer() if binding.param_type == PARAM_INT else String()
                clause = clause.bindparams(
                    bindparam(binding.placeholder, binding.value, type_=sql_type)
                )
                bindings[binding.placeholder] = binding

        # Bindings are applied only once every placeholder was accepted
        statement.clause = clause
        statement.bindings = bindings
        logger.debug(f"Bound {sorted(params)} on statement {name!r}")
        return statement

    def __contains__(self, name: object) -> bool:
        return name in self._statements

    def __len__(self) -> int:
        return len(self._statements)
