"""
Unit tests for the URL model.
"""

import pytest

from restclient.core.params import Params
from restclient.core.resource import Resource
from restclient.errors import InvalidArgumentError


class TestParsing:
    """Tests for Resource(url)."""

    def test_all(self):
        r = Resource("http://example.com:80/a/index.html?foo=bar&baz=qux")

        assert r.scheme == "http"
        assert r.host == "example.com"
        assert r.port == 80
        assert str(r.path) == "/a/index.html"
        assert str(r.query) == "foo=bar&baz=qux"
        assert str(r) == "http://example.com:80/a/index.html?foo=bar&baz=qux"

    def test_scheme(self):
        r = Resource("https://")

        assert r.scheme == "https"
        assert r.host is None
        assert r.port is None
        assert str(r.path) == ""
        assert str(r.query) == ""
        assert str(r) == "https://"

    def test_path(self):
        r = Resource("/foo/bar")

        assert r.scheme is None
        assert r.host is None
        assert r.port is None
        assert str(r.path) == "/foo/bar"
        assert str(r) == "/foo/bar"

    def test_relative_path(self):
        """A relative path gains a leading slash when serialized."""
        r = Resource("foo/bar")

        assert str(r.path) == "foo/bar"
        assert str(r) == "/foo/bar"

    def test_query(self):
        r = Resource("?foo=bar&baz=qux")

        assert r.host is None
        assert str(r.path) == ""
        assert str(r.query) == "foo=bar&baz=qux"
        assert str(r) == "foo=bar&baz=qux"

    def test_query_array(self):
        r = Resource("?foo[]=bar&foo[]=baz")

        assert str(r.query) == "foo%5B%5D=bar&foo%5B%5D=baz"
        assert str(r) == "foo%5B%5D=bar&foo%5B%5D=baz"

    def test_bare_host_and_port(self):
        r = Resource("localhost:8888")

        assert r.scheme is None
        assert r.host == "localhost"
        assert r.port == 8888
        assert str(r) == "//localhost:8888"

    def test_empty(self):
        assert str(Resource()) == ""
        assert str(Resource("")) == ""

    def test_invalid_port(self):
        with pytest.raises(InvalidArgumentError):
            Resource("http://example.com:0/")
        with pytest.raises(InvalidArgumentError):
            Resource(scheme="http", host="example.com", port=70000)

    def test_from_parts(self):
        r = Resource(scheme="https", host="api.example.com", path="v1/items", query={"page": 2})
        assert str(r) == "https://api.example.com/v1/items?page=2"

    @pytest.mark.parametrize(
        "url",
        [
            "http://example.com:80/a/index.html?foo=bar&baz=qux",
            "https://api.example.com/v1/search?q=a+b&tags%5B%5D=x",
            "//example.com/path",
            "/only/a/path",
        ],
    )
    def test_round_trip_fields(self, url):
        first = Resource(url)
        second = Resource(str(first))

        assert (second.scheme, second.host, second.port) == (first.scheme, first.host, first.port)
        assert second.path == first.path
        assert second.query == first.query


class TestMerge:
    """Tests for Resource.merge."""

    def test_overlay_path_on_base(self):
        base = Resource("https://api.example.com")
        merged = base.merge(Resource("/users/1"))

        assert str(merged) == "https://api.example.com/users/1"

    def test_overlay_scalars_win(self):
        merged = Resource("http://a.example:8000/x").merge(Resource("https://b.example/y"))

        assert merged.scheme == "https"
        assert merged.host == "b.example"
        assert merged.port == 8000
        assert str(merged.path) == "/y"

    def test_path_replaced_not_joined(self):
        merged = Resource("https://api.example.com/v1").merge(Resource("/users"))
        assert str(merged) == "https://api.example.com/users"

    def test_empty_overlay_keeps_base(self):
        base = Resource("https://api.example.com/v1?key=abc")
        merged = base.merge(Resource(""))

        assert str(merged) == "https://api.example.com/v1?key=abc"

    def test_query_replaced_and_indexed_flag_inherited(self):
        base = Resource("https://api.example.com?a=1", indexed=True)
        merged = base.merge(Resource("/x?b[]=2"))

        assert merged.query.to_dict() == {"b": ["2"]}
        assert merged.query.indexed is True
        assert str(merged) == "https://api.example.com/x?b%5B0%5D=2"

    def test_merge_does_not_mutate(self):
        base = Resource("https://api.example.com/v1")
        overlay = Resource("/users")
        merged = base.merge(overlay)
        merged.path.append("1")

        assert str(base.path) == "/v1"
        assert str(overlay.path) == "/users"

    def test_relative_overlay_path(self):
        merged = Resource("https://api.example.com").merge("users")
        assert str(merged.path) == "users"
        assert str(merged) == "https://api.example.com/users"


class TestWithQuery:
    def test_with_query(self):
        r = Resource("https://api.example.com/items?a=1")
        updated = r.with_query(r.query.merge(Params({"b": "2"})))

        assert str(updated) == "https://api.example.com/items?a=1&b=2"
        assert str(r) == "https://api.example.com/items?a=1"
