"""
Unit tests for route-to-file mapping.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from domain.site_build.routes import (
    OutputPathAllocator,
    is_static_route,
    page_html_path,
    route_digest,
    sanitize_route,
)
from tests.property.strategies import static_routes, wildcard_routes


class TestPageHtmlPath:
    """Test mapping of single routes."""

    @pytest.mark.parametrize(
        "route,expected",
        [
            ("/", "index.html"),
            ("", "index.html"),
            ("/about", "about/index.html"),
            ("/about/", "about/index.html"),
            ("/blog/post-1", "blog/post-1/index.html"),
            ("/a:b", "a_b/index.html"),
            ('/q?x="1"', "q_x=_1_/index.html"),
            ("/<tag>|pipe", "_tag__pipe/index.html"),
        ],
    )
    def test_maps_routes_to_index_files(self, route, expected):
        assert page_html_path(route) == expected

    @pytest.mark.parametrize("route", ["/*", "/blog/*", "/docs/*/edit", "*"])
    def test_wildcard_routes_have_no_file(self, route):
        assert not is_static_route(route)
        assert page_html_path(route) is None

    def test_parent_segments_stay_inside_output(self):
        """'..' segments are neutralised instead of escaping the output dir."""
        assert page_html_path("/../../etc") == "__/__/etc/index.html"
        assert page_html_path("/./about") == "about/index.html"

    def test_sanitize_route_only_replaces_forbidden_characters(self):
        assert sanitize_route("/a<b>c:d\"e|f?g") == "/a_b_c_d_e_f_g"
        assert sanitize_route("/plain-route_1") == "/plain-route_1"


class TestRouteProperties:
    """Property-based checks for the route mapping."""

    @given(static_routes())
    def test_static_routes_map_to_safe_index_files(self, route):
        path = page_html_path(route)

        assert path is not None
        assert path.endswith("index.html")
        assert not path.startswith("/")
        assert ".." not in path.split("/")
        assert not any(ch in path for ch in '<>:"|?')

    @given(wildcard_routes())
    def test_wildcard_routes_are_always_skipped(self, route):
        assert page_html_path(route) is None

    @given(st.lists(static_routes(), max_size=12))
    def test_allocator_never_reuses_a_path(self, routes):
        allocator = OutputPathAllocator()

        paths = [allocator.allocate(route) for route in routes]

        assert len(set(paths)) == len(paths)


class TestOutputPathAllocator:
    """Test collision handling between routes."""

    def test_first_route_keeps_plain_path(self):
        allocator = OutputPathAllocator()

        assert allocator.allocate("/a:b") == "a_b/index.html"
        assert allocator.collisions == {}

    def test_colliding_route_gets_disambiguated_directory(self):
        # Arrange
        allocator = OutputPathAllocator()
        allocator.allocate("/a:b")

        # Act
        path = allocator.allocate("/a|b")

        # Assert
        assert path == f"a_b-{route_digest('/a|b')}/index.html"
        assert allocator.collisions == {"/a|b": path}

    def test_root_collision_uses_index_prefix(self):
        allocator = OutputPathAllocator()
        allocator.allocate("/")

        path = allocator.allocate("")

        assert path == f"index-{route_digest('')}/index.html"

    def test_repeated_route_gets_numbered_directories(self):
        allocator = OutputPathAllocator()

        paths = [allocator.allocate("/about") for _ in range(3)]

        digest = route_digest("/about")
        assert paths == [
            "about/index.html",
            f"about-{digest}/index.html",
            f"about-{digest}-2/index.html",
        ]

    def test_wildcard_route_is_not_recorded(self):
        allocator = OutputPathAllocator()

        assert allocator.allocate("/blog/*") is None
        assert allocator.collisions == {}
