"""
Unit tests for query/body parameters.
"""

from enum import Enum, IntEnum

import pytest

from restclient.core.params import Params, parse_query


class TestSerialization:
    """Tests for str(Params)."""

    def test_scalar(self):
        assert str(Params({"foo": "bar"})) == "foo=bar"

    def test_mixed_values(self):
        """Strings are form-encoded, numbers are emitted as-is."""
        params = Params({"foo": " bar", "baz": 1, "bat": ["foo", "bar"]})
        assert str(params) == "foo=+bar&baz=1&bat%5B%5D=foo&bat%5B%5D=bar"

    def test_indexed(self):
        params = Params({"foo": " bar", "baz": 1, "bat": ["foo", "bar", "baz[12]"]}, indexed=True)
        assert str(params) == "foo=+bar&baz=1&bat%5B0%5D=foo&bat%5B1%5D=bar&bat%5B2%5D=baz%5B12%5D"

    def test_explicit_indexes_ignored_when_not_indexed(self):
        params = Params({"foo": {0: "bar", 1: "baz"}})
        assert str(params) == "foo%5B%5D=bar&foo%5B%5D=baz"

    def test_empty_string_element_kept(self):
        params = Params({"foo": ["bar", "baz", ""]})
        assert str(params) == "foo%5B%5D=bar&foo%5B%5D=baz&foo%5B%5D="

    def test_nested(self):
        """Nested containers repeat the brackets."""
        params = Params({"foo": {"bar": {"baz": "qux"}}})
        assert str(params) == "foo%5B%5D%5B%5D=qux"

        params = Params({"foo": [["a", "b"]]}, indexed=True)
        assert str(params) == "foo%5B0%5D%5B0%5D=a&foo%5B0%5D%5B1%5D=b"

    def test_unencoded_keys(self):
        params = Params({"bat": ["foo"]}, encode_keys=False)
        assert str(params) == "bat[]=foo"

    def test_float_bool_none(self):
        params = Params({"f": 1.5, "t": True, "n": None})
        assert str(params) == "f=1.5&t=1&n="

    def test_enum_members(self):
        """Enum members serialize as their values, IntEnum included."""

        class Priority(IntEnum):
            HIGH = 1

        class Unit(Enum):
            SI = "si units"

        params = Params({"p": Priority.HIGH, "u": Unit.SI, "l": [Priority.HIGH]})
        assert str(params) == "p=1&u=si+units&l%5B%5D=1"

    def test_empty(self):
        assert str(Params()) == ""
        assert str(Params({"a": [], "b": "x"})) == "b=x"


class TestParsing:
    """Tests for parsing query strings."""

    def test_flat(self):
        assert parse_query("foo=bar&baz=qux") == {"foo": "bar", "baz": "qux"}

    def test_appended_arrays(self):
        assert parse_query("foo[]=bar&foo[]=baz") == {"foo": ["bar", "baz"]}

    def test_decodes(self):
        assert parse_query("foo=+bar&a%5B%5D=x%26y") == {"foo": " bar", "a": ["x&y"]}

    def test_missing_value(self):
        assert parse_query("flag&x=1") == {"flag": "", "x": "1"}

    def test_explicit_index_overwrites(self):
        """A later explicit index replaces an earlier appended value."""
        assert parse_query("a[]=x&a[]=y&a[0]=z") == {"a": ["z", "y"]}

    def test_sparse_indexes(self):
        assert parse_query("a[3]=x&a[]=y") == {"a": {3: "x", 4: "y"}}

    def test_params_from_string(self):
        params = Params("foo=bar&bat[]=1&bat[]=2")
        assert params["foo"] == "bar"
        assert params["bat"] == ["1", "2"]
        assert str(params) == "foo=bar&bat%5B%5D=1&bat%5B%5D=2"

    @pytest.mark.parametrize(
        "data",
        [
            {"foo": " bar", "baz": "1"},
            {"list": ["a b", "", "c&d"], "x": "y"},
            {"key with space": ["1", "2", "3"]},
        ],
    )
    def test_indexed_round_trip(self, data):
        params = Params(data, indexed=True)
        assert Params(str(params), indexed=True) == params


class TestMerge:
    """Tests for Params.merge."""

    def test_scalars_overwritten(self):
        merged = Params({"a": "1", "b": "2"}).merge({"b": "3", "c": "4"})
        assert merged.to_dict() == {"a": "1", "b": "3", "c": "4"}

    def test_arrays_accumulate(self):
        base = Params({"tags": ["a", "b"]})
        merged = base.merge(Params({"tags": ["c"]}))

        assert merged["tags"] == ["a", "b", "c"]
        assert len(merged["tags"]) >= max(len(base["tags"]), 1)

    def test_scalar_and_array_accumulate(self):
        merged = Params({"tags": "a"}).merge({"tags": ["b"]})
        assert merged["tags"] == ["a", "b"]

    def test_nested_mappings_merge(self):
        merged = Params({"f": {"x": "1", "y": "2"}}).merge({"f": {"y": "3"}})
        assert merged["f"] == {"x": "1", "y": "3"}

    def test_not_mutating(self):
        base = Params({"tags": ["a"]})
        other = Params({"tags": ["b"]})
        base.merge(other)

        assert base["tags"] == ["a"]
        assert other["tags"] == ["b"]

    def test_keeps_flags_of_base(self):
        base = Params({"a": ["x"]}, indexed=True, encode_keys=False)
        merged = base.merge(Params({"b": "y"}))

        assert merged.indexed is True
        assert merged.encode_keys is False
        assert str(merged) == "a[0]=x&b=y"


class TestMappingBehaviour:
    def test_read_only_mapping(self):
        params = Params({"a": "1"})
        assert "a" in params
        assert len(params) == 1
        assert list(params) == ["a"]
        with pytest.raises(TypeError):
            params["b"] = "2"  # type: ignore[index]

    def test_copy_isolated_from_source(self):
        source = {"a": ["1"]}
        params = Params(source)
        source["a"].append("2")
        assert params["a"] == ["1"]

    def test_equality_ignores_flags(self):
        assert Params({"a": "1"}, indexed=True) == Params({"a": "1"})
        assert Params({"a": "1"}) == {"a": "1"}

    def test_with_flags(self):
        params = Params({"a": ["x"]}).with_flags(indexed=True)
        assert str(params) == "a%5B0%5D=x"
