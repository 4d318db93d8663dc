"""SQL verb classification for the statement dispatch guards."""

import re

from corkscrew.exceptions import InvalidQueryError

SELECT = "select"
INSERT = "insert"
UPDATE = "update"
DELETE = "delete"

QUERY_KINDS = frozenset({SELECT, INSERT, UPDATE, DELETE})

_LEADING_WORD = re.compile(r"\s*([A-Za-z]+)")


class QueryClassifier:
    """
    Guard that checks a query's leading verb against an expected kind.

    Only the first word is inspected; the rest of the SQL is left to the
    backend.
    """

    @staticmethod
    def normalize_kind(kind: str) -> str:
        """
        Lower-case and check a query kind.

        Raises:
            ValueError: If kind is not select, insert, update or delete
        """
        normalized = kind.lower()
        if normalized not in QUERY_KINDS:
            raise ValueError(
                f"Unknown query kind: {kind}. "
                f"Expected one of: {', '.join(sorted(QUERY_KINDS))}"
            )
        return normalized

    @staticmethod
    def leading_verb(query: str) -> str:
        """Return the lower-cased first word of a query, or "" if there is none."""
        match = _LEADING_WORD.match(query)
        return match.group(1).lower() if match else ""

    @classmethod
    def matches(cls, query: str, kind: str) -> bool:
        """Check whether the query's leading verb is ``kind``."""
        return cls.leading_verb(query) == cls.normalize_kind(kind)

    @classmethod
    def validate(cls, query: str, kind: str) -> bool:
        """
        Require the query's leading verb to be ``kind``.

        Args:
            query: SQL text
            kind: Expected verb (select, insert, update or delete)

        Returns:
            True

        Raises:
            InvalidQueryError: If the leading verb does not match
        """
        if not cls.matches(query, kind):
            raise InvalidQueryError(kind.lower(), query)
        return True
