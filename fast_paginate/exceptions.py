"""
Custom exception classes for the library.

This module defines the exceptions raised to callers. Queries that cannot
be rewritten for deferred-join pagination are not errors: they are reported
as an ``Incompatible`` value and paginated the standard way.
"""


class FastPaginateError(Exception):
    """
    Base exception class for all library exceptions.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str):
        """
        Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class ValidationError(FastPaginateError):
    """
    Pagination arguments failed validation.

    Raised when a per-page size or pagination option cannot be used.
    """


class QueryBuilderError(FastPaginateError):
    """
    Query builder misuse.

    Raised when a column, relationship or clause passed to the query builder
    cannot be resolved against the model.
    """

