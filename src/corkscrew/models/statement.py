"""Prepared statement models."""

from typing import Any, Literal

from pydantic import BaseModel, Field
from sqlalchemy.sql.elements import TextClause

PARAM_INT = "int"
PARAM_STR = "str"


class ParameterBinding(BaseModel):
    """A typed value attached to one placeholder."""

    placeholder: str = Field(..., description="Placeholder name without the leading colon")
    value: Any = Field(..., description="Value after type coercion")
    param_type: Literal["int", "str"] = Field(..., description="Bound parameter type")


class NamedStatement(BaseModel):
    """A prepared statement registered under a caller-chosen name."""

    name: str = Field(..., description="Registry key")
    sql: str = Field(..., description="Raw SQL text the statement was compiled from")
    clause: TextClause = Field(..., description="Compiled statement with bound values")
    bindings: dict[str, ParameterBinding] = Field(
        default_factory=dict, description="Current bindings by placeholder"
    )

    model_config = {"arbitrary_types_allowed": True}

    @property
    def is_bound(self) -> bool:
        """Check if any parameter has been bound."""
        return bool(self.bindings)

    @property
    def params(self) -> dict[str, Any]:
        """Bound values by placeholder."""
        return {key: binding.value for key, binding in self.bindings.items()}
