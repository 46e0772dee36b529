"""Pydantic models for tool descriptors and tool results."""

import json
from typing import Any, Dict, List, Literal
from pydantic import BaseModel, Field, ConfigDict


class ToolDescriptor(BaseModel):
    """A tool advertised through tools/list."""
    name: str
    description: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextContent(BaseModel):
    """A single text content block."""
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform tools/call result envelope."""
    content: List[TextContent]

    @classmethod
    def from_payload(cls, payload: Any) -> "ToolResult":
        """Wrap a raw handler payload as pretty-printed JSON text."""
        return cls(content=[TextContent(text=json.dumps(payload, indent=2, ensure_ascii=False))])

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump()
