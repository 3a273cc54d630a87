"""Raw module and dependency records supplied by the host build."""

from __future__ import annotations

import json
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from circulardeps.models.enums import DependencyKind

ModuleId = Union[int, str]


class DependencyRef(BaseModel):
    """A dependency reference from one module to another.

    ``module`` is the id of the target module, or ``None`` when the host
    could not resolve the reference.
    """

    model_config = ConfigDict(frozen=True)

    module: Optional[ModuleId] = Field(
        default=None,
        description="Id of the target module (None when unresolved)",
    )
    weak: bool = Field(
        default=False,
        description="Whether the reference is weak/asynchronous (lazy import)",
    )
    kind: DependencyKind = Field(
        default=DependencyKind.IMPORT,
        description="Origin of the reference",
    )


class ModuleRecord(BaseModel):
    """One module of the build and its outgoing dependency references."""

    model_config = ConfigDict(frozen=True)

    id: ModuleId = Field(..., description="Stable module identity")
    resource: Optional[str] = Field(
        default=None,
        description="Display resource (usually the file path); None for virtual modules",
    )
    dependencies: list[DependencyRef] = Field(
        default_factory=list,
        description="Outgoing references in source order",
    )


class ModuleManifest(BaseModel):
    """A snapshot of the modules of one build, as read from JSON."""

    modules: list[ModuleRecord] = Field(default_factory=list)

    @property
    def module_count(self) -> int:
        return len(self.modules)

    @classmethod
    def from_json(cls, json_str: str) -> ModuleManifest:
        """Parse a manifest from its JSON text.

        Raises:
            ValueError: If the text is not valid JSON or does not describe
                a manifest.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid manifest JSON: {exc}") from exc
        return cls.model_validate(data)
