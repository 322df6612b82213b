"""
Import data models.

Models representing the imports and exported methods of wrapper files.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ImportRecord(BaseModel):
    """A named-import statement found in a wrapper file."""

    wrapper_path: str = Field(description="Path of the importing wrapper file")
    source: str = Field(description="Import source path as written (unresolved)")
    symbols: list[str] = Field(
        default_factory=list,
        description="Named symbols bound by the import (original names)",
    )
    is_generated_source: bool = Field(
        default=False,
        description="Whether the source path targets the generated-code subtree",
    )
    type_only: bool = Field(default=False, description="`import type { ... }` form")
    line_number: Optional[int] = Field(default=None)

    class Config:
        frozen = True


class MethodSignature(BaseModel):
    """An async method or function with a typed Promise return."""

    name: str = Field(description="Method name")
    return_type: str = Field(description="Type argument of the Promise return")
    line_number: Optional[int] = Field(default=None)

    class Config:
        frozen = True


class WrapperFileProfile(BaseModel):
    """Imports and exported methods of one wrapper file."""

    path: str = Field(description="Wrapper file path")
    imports: list[ImportRecord] = Field(default_factory=list)
    methods: list[MethodSignature] = Field(default_factory=list)
    note: Optional[str] = Field(
        default=None,
        description="Set when the profile was built from reduced-fidelity input",
    )

    class Config:
        frozen = True

    @property
    def generated_imports(self) -> list[ImportRecord]:
        """Imports whose source path targets the generated subtree."""
        return [imp for imp in self.imports if imp.is_generated_source]

    @property
    def method_names(self) -> list[str]:
        return [m.name for m in self.methods]
