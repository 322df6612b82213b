"""
Endpoint data models.

Models representing callable operations declared in generated API files.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EndpointKind(str, Enum):
    """Kind tag for an endpoint descriptor."""

    API_METHOD = "api-method"


class EndpointDescriptor(BaseModel):
    """An async method declared in a generated API file."""

    name: str = Field(description="Method name")
    file_path: str = Field(description="Path of the declaring file")
    kind: EndpointKind = Field(default=EndpointKind.API_METHOD)
    return_type: Optional[str] = Field(
        default=None,
        description="Type argument of the declared Promise return",
    )
    line_number: Optional[int] = Field(
        default=None,
        description="Line number where the method is declared",
    )

    class Config:
        frozen = True

    @property
    def identifier(self) -> tuple[str, str]:
        """Identity of an endpoint: the same name in two files is two endpoints."""
        return (self.name, self.file_path)
