from typing import Any, Mapping

from pydantic import BaseModel, field_validator


class PaginationOptions(BaseModel):  # type: ignore[misc]
    """
    Caller-supplied switches for rewriting the outer query.

    Attributes:
        should_preserve_wheres: Keep the original WHERE criteria on the
            outer query even when no joins remain.
        should_omit_wheres: Drop the original WHERE criteria from the outer
            query even when joins remain.
        should_omit_joins: Drop the original joins (and their bindings) from
            the outer query.

    A switch is on only when given exactly ``True``; truthy values such as
    ``1`` or ``"yes"`` leave it off.
    """

    model_config = {"extra": "ignore", "frozen": True}

    should_preserve_wheres: bool = False
    should_omit_wheres: bool = False
    should_omit_joins: bool = False

    @field_validator(
        "should_preserve_wheres",
        "should_omit_wheres",
        "should_omit_joins",
        mode="before",
    )
    @classmethod
    def only_literal_true(cls, v: Any) -> bool:
        return v is True

    @classmethod
    def coerce(
        cls, options: "PaginationOptions | Mapping[str, Any] | None"
    ) -> "PaginationOptions":
        """
        Build options from a model instance, a mapping or None.

        Args:
            options: Options as passed to a pagination entry point.

        Returns:
            A PaginationOptions instance.
        """
        if options is None:
            return cls()
        if isinstance(options, PaginationOptions):
            return options
        return cls.model_validate(dict(options))
