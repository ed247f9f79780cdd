"""Tests for identifier wrapping and column rendering."""

from sqlalchemy import bindparam, func, literal_column, text

from tests.support.models import User


class TestWrap:
    """Tests for Grammar.wrap."""

    def test_wrap_plain_identifier(self, grammar):
        assert grammar.wrap("name") == '"name"'

    def test_wrap_dotted_identifier(self, grammar):
        assert grammar.wrap("users.id") == '"users"."id"'

    def test_wrap_aliased_identifier(self, grammar):
        assert grammar.wrap("users.name as n") == '"users"."name" as "n"'

    def test_wrap_leaves_star_alone(self, grammar):
        assert grammar.wrap("users.*") == '"users".*'


class TestRenderColumn:
    """Tests for Grammar.render_column."""

    def test_render_string_reference(self, grammar):
        assert grammar.render_column("users.id") == '"users"."id"'

    def test_render_raw_expression_string_unchanged(self, grammar):
        assert grammar.render_column("upper(name) as uname") == "upper(name) as uname"

    def test_render_label(self, grammar):
        column = func.lower(User.name).label("lname")

        assert grammar.render_column(column) == "lower(users.name) AS lname"

    def test_render_model_attribute(self, grammar):
        assert grammar.render_column(User.name) == "users.name"

    def test_render_literal_column(self, grammar):
        column = literal_column("count(*) as total")

        assert grammar.render_column(column) == "count(*) as total"


class TestHasParameters:
    """Tests for Grammar.has_parameters."""

    def test_plain_column_has_no_parameters(self, grammar):
        assert grammar.has_parameters(User.name) is False

    def test_label_with_bound_value(self, grammar):
        column = (User.name + "!").label("shout")

        assert grammar.has_parameters(column) is True

    def test_text_with_bind_parameter(self, grammar):
        column = text("name = :value").bindparams(bindparam("value", "x"))

        assert grammar.has_parameters(column) is True

    def test_string_with_placeholder(self, grammar):
        assert grammar.has_parameters("coalesce(name, ?) as n") is True

    def test_string_without_placeholder(self, grammar):
        assert grammar.has_parameters("upper(name) as uname") is False


class TestAliases:
    """Tests for Grammar.aliases."""

    def test_matches_bare_alias(self, grammar):
        assert grammar.aliases("upper(name) as uname", "uname") is True

    def test_matches_wrapped_alias(self, grammar):
        assert grammar.aliases('upper(name) as "uname"', "uname") is True

    def test_match_ignores_case(self, grammar):
        assert grammar.aliases("upper(name) AS uname", "uname") is True

    def test_partial_alias_does_not_match(self, grammar):
        assert grammar.aliases("upper(name) as unames", "uname") is False
        assert grammar.aliases("upper(name) as uname", "unam") is False

    def test_column_without_alias_does_not_match(self, grammar):
        assert grammar.aliases("users.name", "name") is False

    def test_as_inside_identifier_does_not_match(self, grammar):
        assert grammar.aliases("alias uname", "uname") is False


class TestColumnName:
    """Tests for Grammar.column_name and Grammar.label_name."""

    def test_string_name(self, grammar):
        assert grammar.column_name("name") == "name"

    def test_expression_name(self, grammar):
        assert grammar.column_name(User.name) == "name"

    def test_raw_order_has_no_name(self, grammar):
        assert grammar.column_name(None) is None

    def test_label_name(self, grammar):
        assert grammar.label_name(func.lower(User.name).label("lname")) == "lname"
        assert grammar.label_name(User.name) is None
