"""Tests for the exception hierarchy."""

import pytest

from fast_paginate.exceptions import (
    FastPaginateError,
    QueryBuilderError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test that every library error derives from FastPaginateError."""

    @pytest.mark.parametrize("error_class", [ValidationError, QueryBuilderError])
    def test_subclasses_base_error(self, error_class):
        ex = error_class("Something went wrong")

        assert isinstance(ex, FastPaginateError)
        assert ex.message == "Something went wrong"
        assert str(ex) == "Something went wrong"

    def test_catch_with_base_error(self):
        with pytest.raises(FastPaginateError):
            raise QueryBuilderError("bad column")
