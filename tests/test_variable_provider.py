"""Tests for StandardVariableProvider and path resolution."""

from __future__ import annotations

from collections import defaultdict

import pytest
from hypothesis import given
from hypothesis import strategies as st

from verso import InvalidVariableError, StandardVariableProvider, VariableProvider
from verso.variables import MISSING, resolve_segment


class User:
    def __init__(self) -> None:
        self.name = "Ada"
        self._secret = "hidden"

    def get_email(self) -> str:
        return "ada@example.com"

    def is_admin(self) -> bool:
        return True

    def has_avatar(self) -> bool:
        return False


class TestPathResolution:
    """Test get_by_path over nested data."""

    def test_nested_mapping(self, provider: StandardVariableProvider) -> None:
        """Dotted paths walk nested dicts."""
        assert provider.get_by_path("a.b.c") == 42

    def test_absent_segment_is_none(self, provider: StandardVariableProvider) -> None:
        """Missing segments resolve to None, never raise."""
        assert provider.get_by_path("a.b.missing") is None
        assert provider.get_by_path("a.b.c.deeper") is None
        assert provider.get_by_path("nothing") is None

    def test_sequence_index(self, provider: StandardVariableProvider) -> None:
        """Numeric segments index sequences."""
        assert provider.get_by_path("items.1") == "y"
        assert provider.get_by_path("items.-1") == "y"
        assert provider.get_by_path("items.5") is None
        assert provider.get_by_path("items.first") is None

    def test_object_attributes_and_accessors(self) -> None:
        """Objects resolve attributes, then get_/is_/has_ accessors."""
        provider = StandardVariableProvider({"user": User()})
        assert provider.get_by_path("user.name") == "Ada"
        assert provider.get_by_path("user.email") == "ada@example.com"
        assert provider.get_by_path("user.admin") is True
        assert provider.get_by_path("user.avatar") is False

    def test_private_attributes_are_hidden(self) -> None:
        """Segments starting with an underscore never resolve on objects."""
        provider = StandardVariableProvider({"user": User()})
        assert provider.get_by_path("user._secret") is None

    def test_lookup_does_not_insert_into_defaultdict(self) -> None:
        """Missing keys of a defaultdict resolve to None without being created."""
        nested: defaultdict[str, dict] = defaultdict(dict)
        nested["known"]["c"] = 1
        provider = StandardVariableProvider({"a": nested})
        assert provider.get_by_path("a.missing.c") is None
        assert provider.get_by_path("a.known.c") == 1
        assert list(nested) == ["known"]

    def test_scalars_are_not_traversed(self) -> None:
        """Strings and numbers have no segments."""
        assert resolve_segment("text", "upper") is MISSING
        assert resolve_segment(5, "real") is MISSING
        assert resolve_segment(None, "x") is MISSING

    @given(
        value=st.integers() | st.text() | st.booleans(),
        key=st.text(
            alphabet=st.characters(blacklist_categories=("Cs",), blacklist_characters="."),
            min_size=1,
            max_size=8,
        ),
    )
    def test_single_segment_lookup(self, value, key: str) -> None:
        """A bound identifier without separators is found by path."""
        provider = StandardVariableProvider({key: value})
        assert provider.get_by_path(key) == value
        assert provider.get(key) == value


class TestMutation:
    """Test add / add_or_update / remove."""

    def test_add_twice_fails(self) -> None:
        """add() refuses to overwrite a bound identifier."""
        provider = StandardVariableProvider()
        provider.add("page", 1)
        with pytest.raises(InvalidVariableError) as exc_info:
            provider.add("page", 2)
        assert exc_info.value.identifier == "page"
        assert provider.get("page") == 1

    def test_remove_then_add(self) -> None:
        """After remove() the identifier can be added again."""
        provider = StandardVariableProvider({"page": 1})
        provider.remove("page")
        assert not provider.exists("page")
        provider.add("page", 2)
        assert provider.get("page") == 2

    def test_remove_missing_is_silent(self) -> None:
        """Removing an unbound identifier is a no-op."""
        StandardVariableProvider().remove("nothing")

    def test_add_or_update(self) -> None:
        """add_or_update replaces bindings."""
        provider = StandardVariableProvider({"page": 1})
        provider.add_or_update("page", 2)
        provider["title"] = "Home"
        assert provider.get_all() == {"page": 2, "title": "Home"}

    def test_source_is_copied(self) -> None:
        """The constructor does not mutate the caller's dict."""
        variables = {"a": 1}
        StandardVariableProvider(variables).add("b", 2)
        assert variables == {"a": 1}

    def test_read_only_source(self) -> None:
        """Object sources can be read but not mutated."""
        provider = StandardVariableProvider()
        provider.set_source(User())
        assert provider.get("name") == "Ada"
        with pytest.raises(TypeError):
            provider.add("x", 1)


class TestScopes:
    """Test scope copies and the mapping protocol."""

    def test_scope_copy_keeps_only_settings(self) -> None:
        """A scope copy sees the new variables plus settings."""
        provider = StandardVariableProvider({"settings": {"lang": "en"}, "outer": 1})
        child = provider.get_scope_copy({"inner": 2})
        assert child.get_all() == {"settings": {"lang": "en"}, "inner": 2}
        assert provider.get("inner") is None

    def test_scope_copy_variables_win(self) -> None:
        """Passed variables replace inherited ones."""
        provider = StandardVariableProvider({"settings": 1})
        assert provider.get_scope_copy({"settings": 2}).get("settings") == 2

    def test_mapping_protocol(self, provider: StandardVariableProvider) -> None:
        """Provider supports in / [] / del / len / iter."""
        assert "a" in provider
        assert provider["nothing"] is None
        del provider["items"]
        assert list(provider) == ["a"]
        assert len(provider) == 1
        assert provider.get_all_identifiers() == ["a"]

    def test_protocol_conformance(self, provider: StandardVariableProvider) -> None:
        """StandardVariableProvider satisfies the VariableProvider protocol."""
        assert isinstance(provider, VariableProvider)
