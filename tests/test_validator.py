"""Tests for prowl.routes.validator."""

from __future__ import annotations

from prowl.routes.compiler import compile_route
from prowl.routes.scanner import categorize
from prowl.routes.types import (
    BoundaryMap,
    DynamicSegment,
    RouteEntry,
    RouteManifest,
    RouteValidationError,
    RouteValidationWarning,
    StaticSegment,
)
from prowl.routes.validator import (
    catch_all_overlaps,
    dedupe,
    detect_deep_nesting,
    detect_page_route_conflicts,
    detect_shadowed_routes,
    format_errors,
    format_warnings,
    has_errors,
    has_warnings,
    structural_key,
    validate_manifest,
    validate_route,
    validate_scan_result,
)

from .conftest import make_scanned


def _route(file_path: str) -> RouteEntry:
    route = compile_route(make_scanned(file_path))
    assert route is not None
    return route


def _manifest(*routes: RouteEntry) -> RouteManifest:
    return RouteManifest(
        routes=routes,
        layouts=BoundaryMap(),
        middleware=BoundaryMap(),
        root_dir="/app",
    )


# ---------------------------------------------------------------------------
# validate_route
# ---------------------------------------------------------------------------


class TestValidateRoute:
    def test_valid_route(self) -> None:
        assert validate_route(_route("users/[id]/page.tsx")) == []
        assert validate_route(_route("page.tsx")) == []
        assert validate_route(_route("shop/[[...cat]]/page.tsx")) == []

    def test_catch_all_not_last(self) -> None:
        errors = validate_route(_route("docs/[...path]/edit/page.tsx"))
        assert [e.message for e in errors] == [
            "Catch-all segment must be the last segment in the route",
        ]
        assert errors[0].type == "invalid-pattern"
        assert errors[0].files == ("docs/[...path]/edit/page.tsx",)

    def test_multiple_catch_alls(self) -> None:
        errors = validate_route(_route("[...a]/[[...b]]/page.tsx"))
        assert [e.message for e in errors] == ["Route cannot have multiple catch-all segments"]

    def test_multiple_catch_alls_not_last(self) -> None:
        messages = [e.message for e in validate_route(_route("[...a]/[...b]/x/page.tsx"))]
        assert "Route cannot have multiple catch-all segments" in messages
        assert "Catch-all segment must be the last segment in the route" in messages

    def test_duplicate_param_names(self) -> None:
        errors = validate_route(_route("[id]/posts/[id]/page.tsx"))
        assert [e.message for e in errors] == [
            "Route cannot have duplicate dynamic segment names: id",
        ]

    def test_empty_pattern(self) -> None:
        route = RouteEntry(
            url_pattern="",
            file_path="x/page.tsx",
            absolute_path="/app/x/page.tsx",
            file_type="page",
            segments=(),
        )
        assert [e.message for e in validate_route(route)] == [
            "Route URL pattern cannot be empty",
            "Route URL pattern must start with /: ",
        ]

    def test_missing_leading_slash(self) -> None:
        route = RouteEntry(
            url_pattern="users",
            file_path="users/page.tsx",
            absolute_path="/app/users/page.tsx",
            file_type="page",
            segments=(StaticSegment("users"),),
        )
        assert [e.message for e in validate_route(route)] == [
            "Route URL pattern must start with /: users",
        ]


# ---------------------------------------------------------------------------
# Cross-route checks
# ---------------------------------------------------------------------------


class TestPageRouteConflicts:
    def test_same_url(self) -> None:
        errors = detect_page_route_conflicts([
            _route("users/route.ts"),
            _route("users/page.tsx"),
        ])
        assert len(errors) == 1
        assert errors[0].type == "conflict"
        assert errors[0].files == ("users/page.tsx", "users/route.ts")

    def test_same_url_through_groups(self) -> None:
        errors = detect_page_route_conflicts([
            _route("(site)/users/page.tsx"),
            _route("(api)/users/route.ts"),
        ])
        assert len(errors) == 1

    def test_two_pages_are_not_a_conflict(self) -> None:
        assert detect_page_route_conflicts([
            _route("(a)/users/page.tsx"),
            _route("(b)/users/page.tsx"),
        ]) == []


class TestShadowedRoutes:
    def test_structural_key_erases_names(self) -> None:
        assert structural_key(_route("users/[id]/page.tsx")) == structural_key(
            _route("users/[userId]/page.tsx")
        )
        assert structural_key(_route("users/[id]/page.tsx")) == (
            ("static", "users"),
            ("dynamic", ""),
        )

    def test_different_param_names(self) -> None:
        warnings = detect_shadowed_routes([
            _route("users/[id]/page.tsx"),
            _route("users/[userId]/page.tsx"),
        ])
        assert len(warnings) == 1
        assert warnings[0].type == "naming-convention"
        assert warnings[0].files == ("users/[id]/page.tsx", "users/[userId]/page.tsx")
        assert "/users/:id" in warnings[0].message
        assert "/users/:userId" in warnings[0].message

    def test_same_pattern_via_groups(self) -> None:
        warnings = detect_shadowed_routes([
            _route("(a)/about/page.tsx"),
            _route("(b)/about/page.tsx"),
        ])
        assert len(warnings) == 1
        assert "both resolve to /about" in warnings[0].message

    def test_every_pair_reported(self) -> None:
        warnings = detect_shadowed_routes([
            _route("[a]/page.tsx"),
            _route("[b]/page.tsx"),
            _route("[c]/page.tsx"),
        ])
        assert len(warnings) == 3

    def test_page_route_pair_left_to_conflicts(self) -> None:
        assert detect_shadowed_routes([
            _route("users/page.tsx"),
            _route("users/route.ts"),
        ]) == []

    def test_distinct_shapes(self) -> None:
        assert detect_shadowed_routes([
            _route("users/[id]/page.tsx"),
            _route("users/new/page.tsx"),
            _route("users/[...rest]/page.tsx"),
        ]) == []

    def test_catch_all_covers_optional_catch_all(self) -> None:
        warnings = detect_shadowed_routes([
            _route("docs/[[...rest]]/page.tsx"),
            _route("docs/[...path]/page.tsx"),
        ])
        assert len(warnings) == 1
        assert warnings[0].type == "naming-convention"
        assert warnings[0].files == ("docs/[...path]/page.tsx", "docs/[[...rest]]/page.tsx")
        assert "its catch-all covers" in warnings[0].message

    def test_catch_all_covers_dynamic_prefix(self) -> None:
        warnings = detect_shadowed_routes([_route("[x]/y/page.tsx"), _route("a/[...p]/page.tsx")])
        assert [w.files for w in warnings] == [("a/[...p]/page.tsx", "[x]/y/page.tsx")]

    def test_catch_all_different_static_prefix(self) -> None:
        assert detect_shadowed_routes([
            _route("docs/[...path]/page.tsx"),
            _route("blog/[[...rest]]/page.tsx"),
        ]) == []

    def test_catch_all_does_not_cover_shorter_route(self) -> None:
        assert detect_shadowed_routes([
            _route("shop/[[...cat]]/page.tsx"),
            _route("page.tsx"),
        ]) == []

    def test_catch_all_overlaps(self) -> None:
        assert catch_all_overlaps(_route("docs/[...p]/page.tsx"), _route("docs/[[...q]]/page.tsx"))
        assert catch_all_overlaps(_route("a/[...p]/page.tsx"), _route("[x]/y/page.tsx"))
        assert not catch_all_overlaps(_route("a/[...p]/page.tsx"), _route("b/c/page.tsx"))
        assert not catch_all_overlaps(_route("a/[id]/page.tsx"), _route("a/b/page.tsx"))

    def test_catch_all_page_route_pair_excluded(self) -> None:
        assert detect_shadowed_routes([
            _route("files/[...path]/page.tsx"),
            _route("files/[...path]/route.ts"),
        ]) == []


class TestDeepNesting:
    def test_over_limit(self) -> None:
        route = _route("a/b/c/d/e/f/page.tsx")
        warnings = detect_deep_nesting([route])
        assert len(warnings) == 1
        assert warnings[0].type == "deep-nesting"
        assert "6 levels" in warnings[0].message

    def test_at_limit(self) -> None:
        assert detect_deep_nesting([_route("a/b/c/d/e/page.tsx")]) == []

    def test_custom_limit(self) -> None:
        assert len(detect_deep_nesting([_route("a/b/page.tsx")], max_depth=1)) == 1

    def test_groups_do_not_count(self) -> None:
        assert detect_deep_nesting([_route("(a)/(b)/(c)/x/y/page.tsx")], max_depth=2) == []


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestValidateScanResult:
    def test_same_directory(self) -> None:
        scan = categorize([make_scanned("users/page.tsx"), make_scanned("users/route.ts")])
        errors = validate_scan_result(scan)
        assert len(errors) == 1
        assert errors[0].type == "conflict"
        assert errors[0].files == ("users/page.tsx", "users/route.ts")

    def test_root_directory_label(self) -> None:
        scan = categorize([make_scanned("page.tsx"), make_scanned("route.ts")])
        assert validate_scan_result(scan)[0].message.endswith(": /")

    def test_no_conflict(self) -> None:
        scan = categorize([make_scanned("users/page.tsx"), make_scanned("api/route.ts")])
        assert validate_scan_result(scan) == []


class TestDedupe:
    def test_same_type_and_files(self) -> None:
        first = RouteValidationError("conflict", "one", ("a", "b"))
        second = RouteValidationError("conflict", "two", ("b", "a"))
        other = RouteValidationError("invalid-pattern", "three", ("a", "b"))
        assert dedupe([first, second, other]) == [first, other]


class TestValidateManifest:
    def test_drops_invalid_routes(self) -> None:
        good = _route("users/page.tsx")
        bad = _route("[id]/[id]/page.tsx")
        result = validate_manifest(_manifest(good, bad))
        assert result.routes == (good,)
        assert len(result.errors) == 1
        assert result.errors[0].files == ("[id]/[id]/page.tsx",)

    def test_conflicting_routes_kept(self) -> None:
        page = _route("users/page.tsx")
        api = _route("users/route.ts")
        result = validate_manifest(_manifest(page, api))
        assert result.routes == (page, api)
        assert len(result.errors) == 1
        assert result.warnings == ()

    def test_keeps_existing_findings(self) -> None:
        existing = RouteValidationError("invalid-pattern", "bad", ("x y/page.tsx",))
        manifest = RouteManifest(
            routes=(),
            layouts=BoundaryMap(),
            middleware=BoundaryMap(),
            root_dir="/app",
            errors=(existing,),
        )
        assert validate_manifest(manifest).errors == (existing,)

    def test_max_depth(self) -> None:
        result = validate_manifest(_manifest(_route("a/b/c/page.tsx")), max_depth=2)
        assert [w.type for w in result.warnings] == ["deep-nesting"]

    def test_idempotent(self) -> None:
        manifest = _manifest(
            _route("users/[id]/page.tsx"),
            _route("users/[uid]/page.tsx"),
            _route("users/page.tsx"),
            _route("users/route.ts"),
        )
        once = validate_manifest(manifest)
        assert validate_manifest(once) == once


# ---------------------------------------------------------------------------
# Error surface
# ---------------------------------------------------------------------------


class TestErrorSurface:
    def test_has_errors(self) -> None:
        assert not has_errors(_manifest())
        manifest = validate_manifest(_manifest(_route("[a]/[a]/page.tsx")))
        assert has_errors(manifest)

    def test_has_warnings(self) -> None:
        assert not has_warnings(_manifest())
        manifest = validate_manifest(
            _manifest(_route("[a]/page.tsx"), _route("[b]/page.tsx"))
        )
        assert has_warnings(manifest)

    def test_format_empty(self) -> None:
        assert format_errors([]) == "No errors"
        assert format_warnings([]) == "No warnings"

    def test_format_errors(self) -> None:
        text = format_errors([
            RouteValidationError("conflict", "Clash", ("a/page.tsx", "a/route.ts")),
            RouteValidationError("invalid-pattern", "Bad", ("b/page.tsx",)),
        ])
        assert text == (
            "1. [conflict] Clash\n"
            "   Files: a/page.tsx, a/route.ts\n"
            "\n"
            "2. [invalid-pattern] Bad\n"
            "   Files: b/page.tsx"
        )

    def test_format_warnings(self) -> None:
        text = format_warnings([
            RouteValidationWarning("deep-nesting", "Too deep", ("a/b/page.tsx",)),
        ])
        assert text == "1. [deep-nesting] Too deep\n   Files: a/b/page.tsx"

    def test_segments_unchanged_by_validation(self) -> None:
        route = _route("users/[id]/page.tsx")
        result = validate_manifest(_manifest(route))
        assert result.routes[0].segments == (StaticSegment("users"), DynamicSegment("id"))
