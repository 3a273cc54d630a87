"""Enumerations for the module dependency data model."""

from enum import Enum


class DependencyKind(str, Enum):
    """Origin of a dependency reference between two modules."""

    IMPORT = "IMPORT"
    REQUIRE = "REQUIRE"
    DYNAMIC_IMPORT = "DYNAMIC_IMPORT"
    CONTEXT = "CONTEXT"
    THIS_BINDING = "THIS_BINDING"
    EXPORTS_BINDING = "EXPORTS_BINDING"

    @property
    def is_self_reference(self) -> bool:
        """Whether the reference is compiler bookkeeping pointing back at its own module."""
        return self in _SELF_REFERENCE_KINDS


_SELF_REFERENCE_KINDS = frozenset(
    {DependencyKind.THIS_BINDING, DependencyKind.EXPORTS_BINDING}
)
