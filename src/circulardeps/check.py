"""Circular dependency check for one build.

Wraps the graph adapter and cycle engine with the reporting policy a build
tool expects: cycles become warnings by default or errors with
``fail_on_error``, resources are shown relative to ``cwd``, and callers can
hook into the start and end of the pass or take over reporting entirely
with ``on_detected``.

Example::

    from circulardeps.check import CheckOptions, CircularDependencyCheck

    check = CircularDependencyCheck(CheckOptions(exclude=r"node_modules"))
    report = check.run(manifest.modules)
    for warning in report.warnings:
        print(warning)
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from circulardeps.graph_ops.adapter import FilterConfig, build_graph
from circulardeps.graph_ops.cycles import dispatch, iter_cycles
from circulardeps.graph_ops.exceptions import CycleDetectedError
from circulardeps.graph_ops.graph import Cycle
from circulardeps.models.module import ModuleId, ModuleRecord

logger = logging.getLogger(__name__)

HookFn = Callable[..., Any]


class CheckOptions(BaseModel):
    """Options for :class:`CircularDependencyCheck`.

    Attributes:
        exclude: Resources matching this pattern are not scanned.
        include: Only resources matching this pattern are scanned.
        allow_async_cycles: Ignore weak (asynchronous) references.
        fail_on_error: Report cycles as errors instead of warnings.
        cwd: Directory reported paths are made relative to.
        on_start: Called as ``on_start(report=...)`` before detection.
        on_detected: Called as ``on_detected(module=..., paths=..., report=...)``
            for every cycle. Replaces the warning/error policy.
        on_end: Called as ``on_end(report=...)`` after detection.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    exclude: Optional[re.Pattern[str]] = None
    include: Optional[re.Pattern[str]] = None
    allow_async_cycles: bool = False
    fail_on_error: bool = False
    cwd: Path = Field(default_factory=Path.cwd)
    on_start: Optional[HookFn] = None
    on_detected: Optional[HookFn] = None
    on_end: Optional[HookFn] = None

    def filter_config(self) -> FilterConfig:
        return FilterConfig(
            exclude=self.exclude,
            include=self.include,
            allow_async_cycles=self.allow_async_cycles,
        )


class CheckReport(BaseModel):
    """Outcome of one check.

    Attributes:
        cycles: Every reported path, already relative to ``cwd``.
        warnings: Warning messages (default policy).
        errors: Errors (``fail_on_error`` policy).
        module_count: Number of modules in the build.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    cycles: list[list[str]] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[CycleDetectedError] = Field(default_factory=list)
    module_count: int = 0

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "module_count": self.module_count,
            "cycles": self.cycles,
            "warnings": self.warnings,
            "errors": [str(err) for err in self.errors],
        }


class CircularDependencyCheck:
    """Runs cycle detection over a build's modules and applies the reporting policy."""

    def __init__(self, options: Optional[CheckOptions] = None) -> None:
        self.options = options or CheckOptions()

    def run(self, modules: Iterable[ModuleRecord]) -> CheckReport:
        """Check *modules* for circular dependencies.

        Raises:
            CycleCallbackError: If ``on_detected`` raised for one or more
                cycles. Every cycle is still handed to it first.
        """
        modules = list(modules)
        by_id: dict[ModuleId, ModuleRecord] = {module.id: module for module in modules}
        report = CheckReport(module_count=len(modules))

        if self.options.on_start is not None:
            self.options.on_start(report=report)

        graph = build_graph(modules, config=self.options.filter_config())

        def handle(cycle: Cycle) -> None:
            paths = self.relative_paths(cycle)
            report.cycles.append(paths)
            if self.options.on_detected is not None:
                self.options.on_detected(
                    module=by_id[cycle.root], paths=paths, report=report
                )
                return
            error = CycleDetectedError(paths)
            if self.options.fail_on_error:
                report.errors.append(error)
            else:
                report.warnings.append(str(error))

        count = dispatch(iter_cycles(graph), handle)
        logger.debug(
            "Checked %d modules: %d circular dependencies", len(modules), count
        )

        if self.options.on_end is not None:
            self.options.on_end(report=report)
        return report

    def relative_paths(self, cycle: Cycle) -> list[str]:
        """Return the cycle's resources relative to the configured ``cwd``."""
        cwd = str(self.options.cwd)
        return [os.path.relpath(resource, cwd) for resource in cycle.paths]
