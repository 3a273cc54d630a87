"""Strongly connected component index used to prune the path search.

A vertex lies on a cycle iff its strongly connected component has more than
one member or it has an edge to itself. Any closed walk through a vertex
stays inside that vertex's component, so the per-root search can ignore
every successor outside it without changing which path it finds first.
"""

from __future__ import annotations

import logging
from typing import Optional

import networkx as nx

from circulardeps.graph_ops.graph import DependencyGraph, Vertex

logger = logging.getLogger(__name__)


class ComponentIndex:
    """Maps each cyclic vertex to the members of its strongly connected component."""

    def __init__(self, components: dict[Vertex, frozenset[Vertex]]) -> None:
        self._components = components

    @classmethod
    def from_graph(cls, graph: DependencyGraph) -> ComponentIndex:
        """Index the part of *graph* reachable from its vertices.

        Vertices without a display resource are left out, mirroring the
        path search, which never enters them.
        """
        digraph = to_networkx(graph)
        components: dict[Vertex, frozenset[Vertex]] = {}
        for scc in nx.strongly_connected_components(digraph):
            if len(scc) == 1:
                (vertex,) = scc
                if not digraph.has_edge(vertex, vertex):
                    continue
            members = frozenset(scc)
            for vertex in members:
                components[vertex] = members

        logger.debug(
            "Component index: %d nodes, %d on cycles",
            digraph.number_of_nodes(),
            len(components),
        )
        return cls(components)

    def is_cyclic(self, vertex: Vertex) -> bool:
        return vertex in self._components

    def component_of(self, vertex: Vertex) -> Optional[frozenset[Vertex]]:
        """Return the cyclic component containing *vertex*, or None."""
        return self._components.get(vertex)

    @property
    def cyclic_vertices(self) -> frozenset[Vertex]:
        return frozenset(self._components)


def to_networkx(graph: DependencyGraph) -> nx.DiGraph:
    """Materialise the reachable, displayable part of *graph* as a DiGraph."""
    digraph = nx.DiGraph()
    pending = [v for v in graph.vertices if graph.resource(v) is not None]
    digraph.add_nodes_from(pending)
    expanded: set[Vertex] = set()

    while pending:
        vertex = pending.pop()
        if vertex in expanded:
            continue
        expanded.add(vertex)
        for head in graph.arrow(vertex):
            if graph.resource(head) is None:
                continue
            digraph.add_edge(vertex, head)
            if head not in expanded:
                pending.append(head)

    return digraph
