"""Tests for tinyroute.routing.convention — URI-derived controller targets."""

import pytest

from tinyroute.routing.convention import (
    ConventionTarget,
    class_segment,
    qualify,
    resolve_convention,
)


class TestClassSegment:
    @pytest.mark.parametrize(
        ("segment", "expected"),
        [
            ("blog", "Blog"),
            ("blog_post", "BlogPost"),
            ("BLOG_POST", "BlogPost"),
            ("foo_bar_baz", "FooBarBaz"),
            ("fooBar", "FooBar"),
            ("FOO", "FOO"),
            ("", ""),
        ],
    )
    def test_conversion(self, segment: str, expected: str) -> None:
        assert class_segment(segment) == expected


class TestResolveConvention:
    def test_blog_post_show(self) -> None:
        target = resolve_convention("blog_post/show")
        assert target.segments == ("BlogPost",)
        assert target.method == "show"
        assert target.qualified_name == "BlogPost"

    def test_namespace_prefix(self) -> None:
        target = resolve_convention("/admin/user_role/edit/", "app.controllers")
        assert target.segments == ("Admin", "UserRole")
        assert target.method == "edit"
        assert target.qualified_name == "app.controllers.Admin.UserRole"

    def test_method_name_untouched(self) -> None:
        target = resolve_convention("blog/Show_All")
        assert target.method == "Show_All"

    def test_single_segment_targets_namespace_root(self) -> None:
        target = resolve_convention("index", "app")
        assert target.segments == ()
        assert target.method == "index"
        assert target.qualified_name == "app"

    def test_empty_uri(self) -> None:
        target = resolve_convention("/", "app")
        assert target == ConventionTarget(namespace="app", segments=(), method="")

    def test_purely_syntactic(self) -> None:
        target = resolve_convention("no_such/thing")
        assert target.qualified_name == "NoSuch"


class TestQualify:
    def test_both(self) -> None:
        assert qualify("app", "Blog") == "app.Blog"

    def test_empty_namespace(self) -> None:
        assert qualify("", "Blog") == "Blog"

    def test_empty_name(self) -> None:
        assert qualify("app", "") == "app"
