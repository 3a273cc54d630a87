"""Cycle detection for a DependencyGraph.

Detection runs in two phases. Phase 1 is the linear-time acyclicity check
from :mod:`circulardeps.graph_ops.acyclic`; most builds stop there. Only
when it finds a back edge does phase 2 run: for each vertex, in vertex
order, an independent depth-first search looks for a path back to that
vertex and reports the first one it finds. One path is reported per vertex
on a cycle, so a loop of three modules is reported three times, each time
starting from a different module.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, TypeVar

from circulardeps.graph_ops.acyclic import is_acyclic
from circulardeps.graph_ops.components import ComponentIndex
from circulardeps.graph_ops.exceptions import CycleCallbackError
from circulardeps.graph_ops.graph import Cycle, DependencyGraph, Vertex

logger = logging.getLogger(__name__)

T = TypeVar("T")


def find_cycle(
    graph: DependencyGraph,
    root: Vertex,
    within: Optional[frozenset[Vertex]] = None,
) -> Optional[list[Vertex]]:
    """Find a closed walk from *root* back to itself.

    The search keeps its own seen-set. A successor that was already seen
    closes a cycle only when it is *root*; any other seen successor belongs
    to a loop not through *root* and that branch is skipped.

    Args:
        graph: The graph to search.
        root: The vertex the walk starts and ends at.
        within: When given, successors outside this set are not followed.

    Returns:
        ``[root, ..., root]`` for the first walk found in adjacency order,
        or None when *root* is on no cycle.
    """
    if graph.resource(root) is None:
        return None

    seen: set[Vertex] = {root}
    stack: list[tuple[Vertex, Iterator[Vertex]]] = [(root, iter(graph.arrow(root)))]

    while stack:
        _, successors = stack[-1]
        for head in successors:
            if within is not None and head not in within:
                continue
            if graph.resource(head) is None:
                continue
            if head in seen:
                if head == root:
                    return [vertex for vertex, _ in stack] + [root]
                continue
            seen.add(head)
            stack.append((head, iter(graph.arrow(head))))
            break
        else:
            stack.pop()

    return None


def iter_cycles(graph: DependencyGraph, prune: bool = True) -> Iterator[Cycle]:
    """Lazily yield one :class:`Cycle` per vertex that lies on a cycle.

    Args:
        graph: The graph to scan.
        prune: Restrict the path search to strongly connected components.
            The cycles yielded are the same either way.
    """
    if is_acyclic(graph):
        logger.debug("Graph with %d vertices is acyclic", graph.vertex_count)
        return

    index = ComponentIndex.from_graph(graph) if prune else None
    for root in graph.vertices:
        within = None
        if index is not None:
            within = index.component_of(root)
            if within is None:
                continue
        vertices = find_cycle(graph, root, within)
        if vertices is None:
            continue
        paths = tuple(graph.resource(vertex) for vertex in vertices)
        yield Cycle(root=root, vertices=tuple(vertices), paths=paths)


def detect_cycles(graph: DependencyGraph) -> Iterator[list[str]]:
    """Lazily yield the resource path of every cycle found in *graph*."""
    for cycle in iter_cycles(graph):
        yield list(cycle.paths)


def dispatch(items: Iterable[T], handler: Callable[[T], object]) -> int:
    """Hand every item to *handler*, continuing past handler failures.

    Returns:
        The number of items handled.

    Raises:
        CycleCallbackError: After all items were handled, if any call to
            *handler* raised.
    """
    failures: list[tuple[T, Exception]] = []
    count = 0
    for item in items:
        count += 1
        try:
            handler(item)
        except Exception as exc:
            logger.warning("Cycle callback failed for %s: %s", item, exc)
            failures.append((item, exc))

    if failures:
        raise CycleCallbackError(failures, reported=count)
    return count


def detect(graph: DependencyGraph, on_cycle: Callable[[list[str]], object]) -> int:
    """Report every cycle of *graph* to *on_cycle*, in vertex-scan order.

    Returns:
        The number of cycles reported.

    Raises:
        CycleCallbackError: If *on_cycle* raised for one or more cycles.
            The remaining cycles are still reported first.
    """
    return dispatch(detect_cycles(graph), on_cycle)
