"""Data models for module dependency snapshots."""

from circulardeps.models.enums import DependencyKind
from circulardeps.models.module import (
    DependencyRef,
    ModuleId,
    ModuleManifest,
    ModuleRecord,
)

__all__ = [
    "DependencyKind",
    "DependencyRef",
    "ModuleId",
    "ModuleManifest",
    "ModuleRecord",
]
