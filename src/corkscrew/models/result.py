"""Execution outcome and error state models."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

SQLSTATE_OK = "00000"
SQLSTATE_GENERAL_ERROR = "HY000"


class WriteResult(BaseModel):
    """Outcome of a non-select statement run through ``exec``."""

    query: str = Field(..., description="Executed SQL text")
    success: bool = Field(default=True, description="Statement executed and committed")
    row_count: int = Field(
        default=-1, description="Affected rows as reported by the driver (-1 if unknown)"
    )
    last_row_id: Optional[Any] = Field(
        None, description="Driver-reported id of the last inserted row, if any"
    )
    execution_time_ms: Optional[float] = Field(
        None, description="Execution time in milliseconds"
    )

    def __bool__(self) -> bool:
        return self.success


class ErrorState(BaseModel):
    """Last error reported by the backend."""

    sqlstate: str = Field(default=SQLSTATE_OK, description="SQLSTATE code")
    driver_code: Optional[Union[int, str]] = Field(
        None, description="Driver-specific error code"
    )
    message: Optional[str] = Field(None, description="Driver-specific error message")

    @property
    def is_error(self) -> bool:
        """Check if this state describes a failure."""
        return self.sqlstate != SQLSTATE_OK

    def as_tuple(self) -> tuple[str, Optional[Union[int, str]], Optional[str]]:
        """Return ``(sqlstate, driver_code, message)``."""
        return (self.sqlstate, self.driver_code, self.message)

    @classmethod
    def from_exception(cls, exc: SQLAlchemyError) -> "ErrorState":
        """
        Extract diagnostics from a SQLAlchemy error.

        DBAPI errors carry the driver exception in ``orig``; drivers expose
        SQLSTATE and codes under different attribute names:

        - psycopg2: ``pgcode``; psycopg 3: ``sqlstate``
        - PyMySQL / mysqlclient: ``args[0]`` is the MySQL error number
        - sqlite3 (3.11+): ``sqlite_errorcode``
        """
        orig = exc.orig if isinstance(exc, DBAPIError) else None
        if orig is None:
            return cls(sqlstate=SQLSTATE_GENERAL_ERROR, message=str(exc))

        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)

        driver_code = getattr(orig, "sqlite_errorcode", None)
        if driver_code is None and orig.args and isinstance(orig.args[0], int):
            driver_code = orig.args[0]

        return cls(
            sqlstate=str(sqlstate) if sqlstate else SQLSTATE_GENERAL_ERROR,
            driver_code=driver_code,
            message=str(orig),
        )
