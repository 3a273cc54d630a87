"""Build a :class:`DependencyGraph` from raw module records.

Filtering decides which modules are *scanned* (become roots of the path
search and may be reported first in a cycle); it does not remove edges.
The successor function is defined for every module with a resource, so a
cycle that passes through excluded modules is still found from any scanned
module on it.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from circulardeps.graph_ops.exceptions import UnknownVertexError
from circulardeps.graph_ops.graph import DependencyGraph
from circulardeps.models.module import DependencyRef, ModuleId, ModuleRecord

logger = logging.getLogger(__name__)


class FilterConfig(BaseModel):
    """Filtering options for graph construction.

    Attributes:
        exclude: Resources matching this pattern are not scanned. ``None``
            matches nothing.
        include: Only resources matching this pattern are scanned. ``None``
            matches everything.
        allow_async_cycles: Drop weak (asynchronous) references so that
            cycles closed only by lazy imports are not reported.
    """

    model_config = ConfigDict(frozen=True)

    exclude: Optional[re.Pattern[str]] = Field(
        default=None,
        description="Pattern of resources to skip",
    )
    include: Optional[re.Pattern[str]] = Field(
        default=None,
        description="Pattern of resources to scan",
    )
    allow_async_cycles: bool = Field(
        default=False,
        description="Ignore weak/asynchronous references",
    )

    def selects(self, resource: Optional[str]) -> bool:
        """Return True if a module with *resource* should be scanned."""
        if resource is None:
            return False
        if self.exclude is not None and self.exclude.search(resource):
            return False
        if self.include is not None and not self.include.search(resource):
            return False
        return True


def _default_dependencies(module: ModuleRecord) -> Sequence[DependencyRef]:
    return module.dependencies


def build_graph(
    modules: Iterable[ModuleRecord],
    dependencies_of: Optional[Callable[[ModuleRecord], Iterable[DependencyRef]]] = None,
    config: Optional[FilterConfig] = None,
) -> DependencyGraph:
    """Build the dependency graph for one detection pass.

    Args:
        modules: Every module of the build, in scan order.
        dependencies_of: Maps a module to its dependency references.
            Defaults to ``module.dependencies``.
        config: Filtering options. Defaults to :class:`FilterConfig()`.

    Returns:
        A graph whose vertices are the ids of the scanned modules.

    Raises:
        ValueError: If two modules share the same id.
    """
    config = config or FilterConfig()
    deps_of = dependencies_of or _default_dependencies

    by_id: dict[ModuleId, ModuleRecord] = {}
    for module in modules:
        if module.id in by_id:
            raise ValueError(f"Duplicate module id '{module.id}'")
        by_id[module.id] = module

    vertices = tuple(
        module_id for module_id, module in by_id.items()
        if config.selects(module.resource)
    )
    successors: dict[ModuleId, tuple[ModuleId, ...]] = {}

    def arrow(vertex: ModuleId) -> tuple[ModuleId, ...]:
        cached = successors.get(vertex)
        if cached is not None:
            return cached
        source = by_id.get(vertex)
        if source is None or source.resource is None:
            raise UnknownVertexError(vertex)

        adjacent: list[ModuleId] = []
        for dep in deps_of(source):
            if dep.kind.is_self_reference:
                continue
            if config.allow_async_cycles and dep.weak:
                continue
            if dep.module is None:
                continue
            target = by_id.get(dep.module)
            if target is None or target.resource is None:
                continue
            if target is source:
                continue
            adjacent.append(target.id)

        result = tuple(adjacent)
        successors[vertex] = result
        return result

    def resource(vertex: ModuleId) -> Optional[str]:
        module = by_id.get(vertex)
        return module.resource if module is not None else None

    logger.debug(
        "Built dependency graph: %d modules, %d scanned", len(by_id), len(vertices)
    )
    return DependencyGraph(vertices=vertices, arrow=arrow, resource=resource)
