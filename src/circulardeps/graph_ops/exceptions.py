"""Custom exceptions for graph operations."""

from __future__ import annotations

from typing import Any, Hashable, Sequence


class GraphOpsError(Exception):
    """Base class for errors raised by graph operations."""


class UnknownVertexError(GraphOpsError, KeyError):
    """Raised when the successor function is asked about a vertex it does not know.

    This always indicates a bug in whatever built the graph, so it is never
    swallowed by the traversal code.
    """

    def __init__(self, vertex: Hashable) -> None:
        self.vertex = vertex
        super().__init__(f"Unknown vertex: {vertex!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class CycleDetectedError(GraphOpsError):
    """Raised (or collected) when a circular dependency is found.

    Attributes:
        paths: The resources forming the cycle, first and last equal.
    """

    def __init__(self, paths: Sequence[str], message: str | None = None) -> None:
        self.paths = list(paths)
        if message is None:
            message = "Circular dependency detected:\n " + " -> ".join(self.paths)
        super().__init__(message)


class CycleCallbackError(GraphOpsError):
    """Raised after a detection pass in which one or more cycle callbacks failed.

    The pass itself always runs to completion; this error only reports the
    callbacks that raised.

    Attributes:
        failures: ``(paths, exception)`` pairs, in the order the cycles
            were reported.
        reported: Total number of cycles handed to the callback.
    """

    def __init__(self, failures: list[tuple[Any, Exception]], reported: int) -> None:
        self.failures = failures
        self.reported = reported
        super().__init__(
            f"{len(failures)} of {reported} cycle callback(s) failed; "
            f"first error: {failures[0][1]!r}"
        )
