"""Graph construction and cycle detection for module dependency graphs."""

from circulardeps.graph_ops.acyclic import (
    depth_first_iterator,
    find_back_edge,
    is_acyclic,
)
from circulardeps.graph_ops.adapter import FilterConfig, build_graph
from circulardeps.graph_ops.components import ComponentIndex
from circulardeps.graph_ops.cycles import (
    detect,
    detect_cycles,
    find_cycle,
    iter_cycles,
)
from circulardeps.graph_ops.exceptions import (
    CycleCallbackError,
    CycleDetectedError,
    GraphOpsError,
    UnknownVertexError,
)
from circulardeps.graph_ops.graph import Cycle, DependencyGraph

__all__ = [
    "ComponentIndex",
    "Cycle",
    "CycleCallbackError",
    "CycleDetectedError",
    "DependencyGraph",
    "FilterConfig",
    "GraphOpsError",
    "UnknownVertexError",
    "build_graph",
    "depth_first_iterator",
    "detect",
    "detect_cycles",
    "find_back_edge",
    "find_cycle",
    "is_acyclic",
    "iter_cycles",
]
