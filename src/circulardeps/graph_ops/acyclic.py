"""Depth-first traversal and acyclicity check for a DependencyGraph.

Three-colour marking: a vertex is undiscovered, discovered (on the current
DFS stack) or finished. An edge into a discovered vertex is a back edge and
proves the graph has a cycle. The traversal uses an explicit stack so that
deep module chains cannot exhaust the interpreter's recursion limit, but
visits vertices in the same order as the recursive formulation.
"""

from __future__ import annotations

from typing import Callable, Iterator, NamedTuple, Optional, Sequence, Union

from circulardeps.graph_ops.graph import DependencyGraph, Vertex

VisitorFn = Callable[[Vertex, Sequence[Vertex]], None]
BackEdgeFn = Callable[[Vertex, Vertex], None]


class Visit(NamedTuple):
    """Traversal event: *vertex* was discovered with successors *adjacent*."""

    vertex: Vertex
    adjacent: Sequence[Vertex]


class BackEdge(NamedTuple):
    """Traversal event: the edge *tail* -> *head* points into the DFS stack."""

    tail: Vertex
    head: Vertex


def walk(graph: DependencyGraph) -> Iterator[Union[Visit, BackEdge]]:
    """Yield DFS events over every vertex of *graph*, roots in vertex order."""
    discovered: set[Vertex] = set()
    finished: set[Vertex] = set()

    for root in graph.vertices:
        if root in discovered or root in finished:
            continue

        adjacent = graph.arrow(root)
        discovered.add(root)
        yield Visit(root, adjacent)
        stack: list[tuple[Vertex, Iterator[Vertex]]] = [(root, iter(adjacent))]

        while stack:
            vertex, successors = stack[-1]
            for head in successors:
                if head in discovered:
                    yield BackEdge(vertex, head)
                elif head not in finished:
                    head_adjacent = graph.arrow(head)
                    discovered.add(head)
                    yield Visit(head, head_adjacent)
                    stack.append((head, iter(head_adjacent)))
                    break
            else:
                stack.pop()
                discovered.discard(vertex)
                finished.add(vertex)


def depth_first_iterator(
    graph: DependencyGraph,
    visitor: Optional[VisitorFn] = None,
    on_back_edge: Optional[BackEdgeFn] = None,
) -> None:
    """Traverse the whole graph depth-first.

    Args:
        graph: The graph to traverse.
        visitor: Called with ``(vertex, adjacent)`` when a vertex is
            discovered.
        on_back_edge: Called with ``(tail, head)`` for every back edge.
    """
    for event in walk(graph):
        if isinstance(event, Visit):
            if visitor is not None:
                visitor(*event)
        elif on_back_edge is not None:
            on_back_edge(*event)


def find_back_edge(graph: DependencyGraph) -> Optional[tuple[Vertex, Vertex]]:
    """Return the first back edge found, or None if the graph is acyclic."""
    for event in walk(graph):
        if isinstance(event, BackEdge):
            return event.tail, event.head
    return None


def is_acyclic(graph: DependencyGraph) -> bool:
    """Return True if no cycle is reachable from the graph's vertices."""
    return find_back_edge(graph) is None
