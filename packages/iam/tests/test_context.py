"""Tests for context path lookup and placeholder interpolation."""

import types

import pytest

from packages.iam.context import apply_context, get_value_from_path


@pytest.fixture
def context():
    """Nested request context."""
    return {
        "user": {
            "id": "42",
            "department": "engineering",
            "teams": ["core", "infra"],
            "active": True,
            "profile": {"level": 3},
        },
        "tenant": types.SimpleNamespace(name="acme", region=None),
        "items": ["zero", "one"],
    }


class TestGetValueFromPath:
    """Tests for get_value_from_path()."""

    def test_nested_key(self, context):
        """Dotted paths walk nested mappings."""
        assert get_value_from_path(context, "user.department") == "engineering"
        assert get_value_from_path(context, "user.profile.level") == 3

    def test_single_key(self, context):
        """A single key returns the top-level value."""
        assert get_value_from_path(context, "user")["id"] == "42"

    def test_missing_key_is_none(self, context):
        """Absent keys resolve to None instead of raising."""
        assert get_value_from_path(context, "user.email") is None
        assert get_value_from_path(context, "missing.deeper.still") is None

    def test_list_renders_as_brace_group(self, context):
        """Sequences are rendered for brace expansion."""
        assert get_value_from_path(context, "user.teams") == "{core,infra}"

    def test_list_index(self, context):
        """Numeric segments index into sequences."""
        assert get_value_from_path(context, "items.1") == "one"
        assert get_value_from_path(context, "items.5") is None
        assert get_value_from_path(context, "items.first") is None

    def test_non_ascii_digits_do_not_index(self, context):
        """Unicode digit segments resolve to None instead of raising."""
        assert get_value_from_path(context, "items.²") is None
        assert get_value_from_path(context, "items.١") is None

    def test_object_attributes(self, context):
        """Plain objects are walked by attribute."""
        assert get_value_from_path(context, "tenant.name") == "acme"
        assert get_value_from_path(context, "tenant.region") is None

    def test_scalars_are_not_walked(self, context):
        """Attribute lookups on strings do not leak methods."""
        assert get_value_from_path(context, "user.id.upper") is None

    def test_none_context(self):
        """A missing context resolves everything to None."""
        assert get_value_from_path(None, "user.id") is None


class TestApplyContext:
    """Tests for apply_context()."""

    def test_substitutes_placeholder(self):
        """Placeholders are replaced with context values."""
        assert apply_context("user:${user.id}", {"user": {"id": "42"}}) == "user:42"

    def test_without_context_is_unchanged(self):
        """No context means no substitution at all."""
        assert apply_context("user:${user.id}", None) == "user:${user.id}"
        assert apply_context("  spaced  ") == "  spaced  "

    def test_empty_context_still_substitutes(self):
        """An empty mapping is a context; lookups are undefined."""
        assert apply_context("user:${user.id}", {}) == "user:undefined"

    def test_missing_value_renders_undefined(self, context):
        """Absent paths become the literal text 'undefined'."""
        assert apply_context("users/${user.email}", context) == "users/undefined"

    def test_explicit_null_renders_undefined(self, context):
        """An explicit None renders the same as a missing key."""
        assert apply_context("regions/${tenant.region}", context) == "regions/undefined"
        assert apply_context("${a.b}", {"a": {"b": None}}) == apply_context("${a.c}", {"a": {}})

    def test_multiple_placeholders(self, context):
        """Every placeholder is substituted."""
        assert apply_context(
            "${tenant.name}/${user.department}/${user.id}", context
        ) == "acme/engineering/42"

    def test_list_value_becomes_brace_group(self, context):
        """Lists are injected as brace groups."""
        assert apply_context("teams/${user.teams}/*", context) == "teams/{core,infra}/*"

    def test_scalar_rendering(self, context):
        """Booleans and whole floats render compactly."""
        assert apply_context("${user.active}", context) == "true"
        assert apply_context("${n}", {"n": 2.0}) == "2"
        assert apply_context("${n}", {"n": 2.5}) == "2.5"

    def test_whitespace_artifacts_are_trimmed(self):
        """Empty substitutions do not leave stray spaces."""
        assert apply_context("a ${b} c", {"b": ""}) == "a c"
        assert apply_context(" ${b}read", {"b": ""}) == "read"
        assert apply_context("read ${b} ", {"b": ""}) == "read"

    def test_placeholder_ends_at_first_brace(self):
        """Placeholders are not nested."""
        assert apply_context("${a}}", {"a": "x"}) == "x}"
