"""
Dialect-aware rendering of identifiers and column expressions.

The column selector compares order-by columns against the rendered text of
selected columns; both sides go through the same Grammar so that quoting is
consistent and a partial name never matches.
"""

import re
from typing import Any

from sqlalchemy.engine import Dialect
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.sql.elements import ClauseElement, Label


class Grammar:
    """
    Identifier wrapping and expression rendering for one SQL dialect.

    Attributes:
        dialect: The SQLAlchemy dialect statements are compiled for.
    """

    def __init__(self, dialect: Dialect | None = None):
        self.dialect = dialect or DefaultDialect()
        self.preparer = self.dialect.identifier_preparer

    @classmethod
    def for_session(cls, session: Any, model: type | None = None) -> "Grammar":
        """
        Build the grammar of the database a session is bound to.

        Args:
            session: Sync or async SQLAlchemy session, or None.
            model: Mapped class used to pick a bind when the session has
                several.

        Returns:
            Grammar for the bound dialect, or for the default dialect when
            no session is given.
        """
        if session is None:
            return cls()
        bind = session.bind
        if bind is None:
            bind = session.get_bind(mapper=model)
        return cls(bind.dialect)

    def wrap(self, value: str) -> str:
        """
        Quote an identifier, a dotted reference or an aliased reference.

        Every segment is quoted, so ``users.id`` becomes ``"users"."id"``
        and ``name as n`` becomes ``"name" as "n"``.

        Args:
            value: Identifier as written by the caller.

        Returns:
            Quoted identifier.
        """
        match = re.match(r"^(.+?)\s+as\s+(.+)$", value, re.IGNORECASE)
        if match:
            return f"{self.wrap(match.group(1))} as {self._wrap_segment(match.group(2))}"
        return ".".join(self._wrap_segment(segment) for segment in value.split("."))

    def _wrap_segment(self, segment: str) -> str:
        if segment == "*":
            return segment
        return self.preparer.quote_identifier(segment)

    def render(self, element: ClauseElement) -> str:
        """Compile an expression to SQL text for this dialect."""
        return str(element.compile(dialect=self.dialect))

    def render_column(self, column: Any) -> str:
        """
        Render a select-list entry.

        Plain string references are wrapped; labeled expressions render as
        ``<expression> AS <label>``; other expressions are compiled.

        Args:
            column: A select-list entry as stored on a QueryBuilder.

        Returns:
            The rendered column.
        """
        if isinstance(column, str):
            if "(" in column:
                return column
            return self.wrap(column)
        element = _clause_element(column)
        if isinstance(element, Label):
            return f"{self.render(element.element)} AS {self.preparer.quote(element.name)}"
        return self.render(element)

    def has_parameters(self, column: Any) -> bool:
        """
        Whether a select-list entry carries bound parameters.

        Args:
            column: A select-list entry as stored on a QueryBuilder.

        Returns:
            True when the compiled column binds values or contains a ``?``
            placeholder.
        """
        if isinstance(column, str):
            return "?" in column
        compiled = _clause_element(column).compile(dialect=self.dialect)
        return bool(compiled.binds) or "?" in str(compiled)

    def aliases(self, rendered: str, name: str) -> bool:
        """
        Whether rendered column text defines the alias ``name``.

        Matches ``as <name>`` in either its wrapped or bare form, ignoring
        case; the alias must be delimited so ``as name`` does not match
        ``as names``.

        Args:
            rendered: Column text from render_column().
            name: Alias to look for.

        Returns:
            True when the alias is defined by the column text.
        """
        candidates = {self.wrap(name), self.preparer.quote(name), name}
        pattern = "|".join(re.escape(candidate) for candidate in candidates)
        return (
            re.search(
                rf'(?<![\w.])as\s+(?:{pattern})(?![\w"`\]])',
                rendered,
                re.IGNORECASE,
            )
            is not None
        )

    @staticmethod
    def column_name(column: Any) -> str | None:
        """
        Name of an order-by column, or None for raw ordering expressions.

        Args:
            column: Column as stored on an order clause.

        Returns:
            The name the column is referenced by.
        """
        if column is None:
            return None
        if isinstance(column, str):
            return column
        return getattr(_clause_element(column), "name", None)

    @staticmethod
    def label_name(column: Any) -> str | None:
        """Alias of a labeled expression, or None for anything else."""
        element = _clause_element(column)
        if isinstance(element, Label):
            return element.name
        return None


def _clause_element(column: Any) -> Any:
    if hasattr(column, "__clause_element__"):
        return column.__clause_element__()
    return column
