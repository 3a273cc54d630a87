"""Graph abstraction consumed by the cycle engine.

A graph is a pair of an ordered vertex list and a successor function::

       x <- y <- z

    vertices == (x, y, z)
    arrow(x) == ()
    arrow(y) == (x,)
    arrow(z) == (y,)

``resource`` maps a vertex to its display resource. Vertices whose resource
is ``None`` are never entered by the path search and never reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Hashable, Mapping, Optional, Sequence

from circulardeps.graph_ops.exceptions import UnknownVertexError

Vertex = Hashable


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable graph for one detection pass.

    Attributes:
        vertices: The vertices to scan, in scan order.
        arrow: Maps a vertex to its ordered adjacent vertices. Raises
            :class:`UnknownVertexError` for vertices it does not know.
        resource: Maps a vertex to its display resource, or ``None``.
    """

    vertices: tuple[Vertex, ...]
    arrow: Callable[[Vertex], Sequence[Vertex]]
    resource: Callable[[Vertex], Optional[str]] = field(default=str)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Mapping[Vertex, Sequence[Vertex]],
        resources: Optional[Mapping[Vertex, Optional[str]]] = None,
    ) -> DependencyGraph:
        """Build a graph from an adjacency mapping.

        Vertices are taken in the mapping's order. When *resources* is
        omitted every vertex is displayed as ``str(vertex)``.

        Example::

            graph = DependencyGraph.from_adjacency({"u": ["v"], "v": ["u"]})
        """
        successors = {vertex: tuple(adjacent) for vertex, adjacent in adjacency.items()}

        def arrow(vertex: Vertex) -> tuple[Vertex, ...]:
            try:
                return successors[vertex]
            except KeyError:
                raise UnknownVertexError(vertex) from None

        if resources is None:
            return cls(vertices=tuple(successors), arrow=arrow)

        def resource(vertex: Vertex) -> Optional[str]:
            return resources.get(vertex)

        return cls(vertices=tuple(successors), arrow=arrow, resource=resource)


@dataclass(frozen=True)
class Cycle:
    """A closed walk found by the path search.

    Attributes:
        root: The vertex the search started from.
        vertices: ``[root, ..., root]`` in discovery order.
        paths: The display resources of ``vertices``.
    """

    root: Vertex
    vertices: tuple[Vertex, ...]
    paths: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.vertices) - 1

    def format(self, separator: str = " -> ") -> str:
        """Join the resources into a readable trail."""
        return separator.join(self.paths)
