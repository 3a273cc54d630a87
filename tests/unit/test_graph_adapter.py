"""Unit tests for circulardeps.graph_ops.adapter."""

from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from circulardeps.graph_ops.adapter import FilterConfig, build_graph
from circulardeps.graph_ops.cycles import detect_cycles
from circulardeps.graph_ops.exceptions import UnknownVertexError
from circulardeps.models.enums import DependencyKind
from circulardeps.models.module import DependencyRef, ModuleRecord


# --------------------------------------------------------------------------- #
#                              Helpers / Fixtures                              #
# --------------------------------------------------------------------------- #


def _module(
    module_id: int | str,
    resource: str | None = "auto",
    deps: list[int | str | DependencyRef] | None = None,
) -> ModuleRecord:
    if resource == "auto":
        resource = f"src/{module_id}.js"
    refs = [
        dep if isinstance(dep, DependencyRef) else DependencyRef(module=dep)
        for dep in deps or []
    ]
    return ModuleRecord(id=module_id, resource=resource, dependencies=refs)


# --------------------------------------------------------------------------- #
#                                FilterConfig                                  #
# --------------------------------------------------------------------------- #


class TestFilterConfig:
    def test_defaults(self) -> None:
        cfg = FilterConfig()
        assert cfg.exclude is None
        assert cfg.include is None
        assert cfg.allow_async_cycles is False

    def test_string_patterns_are_compiled(self) -> None:
        cfg = FilterConfig(exclude=r"node_modules", include=r"\.js$")
        assert isinstance(cfg.exclude, re.Pattern)
        assert cfg.include.search("src/a.js")

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ValidationError):
            FilterConfig(exclude="(")

    def test_selects_defaults(self) -> None:
        cfg = FilterConfig()
        assert cfg.selects("anything.js")
        assert not cfg.selects(None)

    def test_exclude(self) -> None:
        cfg = FilterConfig(exclude=r"f\.js")
        assert not cfg.selects("deps/f.js")
        assert cfg.selects("deps/e.js")

    def test_include(self) -> None:
        cfg = FilterConfig(include=r"f\.js")
        assert cfg.selects("deps/f.js")
        assert not cfg.selects("deps/e.js")

    def test_exclude_wins_over_include(self) -> None:
        cfg = FilterConfig(include=r"deps/", exclude=r"f\.js")
        assert not cfg.selects("deps/f.js")

    def test_search_not_match(self) -> None:
        cfg = FilterConfig(include=r"deps")
        assert cfg.selects("/abs/path/deps/a.js")


# --------------------------------------------------------------------------- #
#                              Vertex selection                                #
# --------------------------------------------------------------------------- #


class TestVertexSelection:
    def test_all_modules_with_resource(self) -> None:
        graph = build_graph([_module(1), _module(2), _module(3, resource=None)])
        assert graph.vertices == (1, 2)

    def test_preserves_input_order(self) -> None:
        graph = build_graph([_module("c"), _module("a"), _module("b")])
        assert graph.vertices == ("c", "a", "b")

    def test_exclude_and_include(self) -> None:
        modules = [_module(name) for name in "defg"]
        graph = build_graph(modules, config=FilterConfig(exclude=r"f\.js"))
        assert graph.vertices == ("d", "e", "g")
        graph = build_graph(modules, config=FilterConfig(include=r"(e|f)\.js"))
        assert graph.vertices == ("e", "f")

    def test_filter_is_idempotent(self) -> None:
        modules = [_module(name) for name in "defg"]
        cfg = FilterConfig(exclude=r"g\.js", include=r"src/")
        once = build_graph(modules, config=cfg)
        kept = [m for m in modules if m.id in once.vertices]
        twice = build_graph(kept, config=cfg)
        assert twice.vertices == once.vertices

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate module id"):
            build_graph([_module(1), _module(1)])

    def test_resource_lookup(self) -> None:
        graph = build_graph([_module(1, resource="a.js")])
        assert graph.resource(1) == "a.js"
        assert graph.resource(99) is None


# --------------------------------------------------------------------------- #
#                             Successor function                               #
# --------------------------------------------------------------------------- #


class TestArrow:
    def test_resolves_targets_in_order(self) -> None:
        graph = build_graph([_module(1, deps=[3, 2]), _module(2), _module(3)])
        assert graph.arrow(1) == (3, 2)

    def test_keeps_duplicate_targets(self) -> None:
        graph = build_graph([_module(1, deps=[2, 2]), _module(2)])
        assert graph.arrow(1) == (2, 2)

    def test_drops_unresolved_references(self) -> None:
        graph = build_graph(
            [_module(1, deps=[DependencyRef(module=None), 42, 2]), _module(2)]
        )
        assert graph.arrow(1) == (2,)

    def test_drops_targets_without_resource(self) -> None:
        graph = build_graph([_module(1, deps=[2, 3]), _module(2, resource=None), _module(3)])
        assert graph.arrow(1) == (3,)

    def test_drops_self_target(self) -> None:
        graph = build_graph([_module(1, deps=[1, 2]), _module(2)])
        assert graph.arrow(1) == (2,)

    @pytest.mark.parametrize(
        "kind", [DependencyKind.THIS_BINDING, DependencyKind.EXPORTS_BINDING]
    )
    def test_drops_synthetic_self_references(self, kind: DependencyKind) -> None:
        graph = build_graph(
            [_module(1, deps=[DependencyRef(module=2, kind=kind)]), _module(2)]
        )
        assert graph.arrow(1) == ()

    def test_weak_references_kept_by_default(self) -> None:
        graph = build_graph([_module(1, deps=[DependencyRef(module=2, weak=True)]), _module(2)])
        assert graph.arrow(1) == (2,)

    def test_weak_references_dropped_with_allow_async_cycles(self) -> None:
        modules = [
            _module(1, deps=[DependencyRef(module=2, weak=True), 3]),
            _module(2),
            _module(3),
        ]
        graph = build_graph(modules, config=FilterConfig(allow_async_cycles=True))
        assert graph.arrow(1) == (3,)

    def test_defined_for_excluded_modules(self) -> None:
        modules = [_module("e", deps=["f"]), _module("f", deps=["e"])]
        graph = build_graph(modules, config=FilterConfig(exclude=r"f\.js"))
        assert "f" not in graph.vertices
        assert graph.arrow("f") == ("e",)

    def test_is_stable(self) -> None:
        graph = build_graph([_module(1, deps=[2]), _module(2)])
        assert graph.arrow(1) is graph.arrow(1)

    def test_unknown_vertex_raises(self) -> None:
        graph = build_graph([_module(1)])
        with pytest.raises(UnknownVertexError):
            graph.arrow(99)

    def test_vertex_without_resource_raises(self) -> None:
        graph = build_graph([_module(1, resource=None)])
        with pytest.raises(UnknownVertexError):
            graph.arrow(1)

    def test_custom_dependency_source(self) -> None:
        edges = {1: [DependencyRef(module=2)], 2: []}
        graph = build_graph(
            [_module(1), _module(2)], dependencies_of=lambda module: edges[module.id]
        )
        assert graph.arrow(1) == (2,)


# --------------------------------------------------------------------------- #
#                          Adapter + engine together                           #
# --------------------------------------------------------------------------- #


class TestDetection:
    def test_self_reference_alone_is_no_cycle(self) -> None:
        modules = [
            _module(1, deps=[DependencyRef(module=1, kind=DependencyKind.THIS_BINDING)]),
        ]
        assert list(detect_cycles(build_graph(modules))) == []

    def test_cycle_through_excluded_module_is_reported(self) -> None:
        modules = [
            _module("e", deps=["f"]),
            _module("f", deps=["g"]),
            _module("g", deps=["e"]),
        ]
        graph = build_graph(modules, config=FilterConfig(exclude=r"f\.js"))
        assert list(detect_cycles(graph)) == [
            ["src/e.js", "src/f.js", "src/g.js", "src/e.js"],
            ["src/g.js", "src/e.js", "src/f.js", "src/g.js"],
        ]

    def test_fully_excluded_cycle_is_not_reported(self) -> None:
        modules = [
            _module("d", deps=["e"]),
            _module("e", deps=["f"]),
            _module("f", deps=["e"]),
        ]
        graph = build_graph(modules, config=FilterConfig(exclude=r"(e|f)\.js"))
        assert list(detect_cycles(graph)) == []

    def test_async_cycle_allowed(self) -> None:
        modules = [
            _module(1, deps=[2]),
            _module(2, deps=[DependencyRef(module=1, weak=True)]),
        ]
        assert len(list(detect_cycles(build_graph(modules)))) == 2
        graph = build_graph(modules, config=FilterConfig(allow_async_cycles=True))
        assert list(detect_cycles(graph)) == []
