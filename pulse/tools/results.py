"""
Transient tool-call types exchanged between the assistant model and the executors.
Neither is persisted on its own; both are embedded into the assistant's chat log row.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ToolCall:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = None  # OpenAI-style providers need the id echoed back

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "args": self.args}


@dataclass
class ToolResult:
    name: str
    success: bool
    result: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, name: str, result: str) -> "ToolResult":
        return cls(name=name, success=True, result=result)

    @classmethod
    def failed(cls, name: str, error: str) -> "ToolResult":
        return cls(name=name, success=False, error=error)

    @property
    def message(self) -> str:
        """The text handed back to the model: the result on success, the error otherwise."""
        return self.result if self.success else self.error

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "success": self.success}
        if self.success:
            data["result"] = self.result
        else:
            data["error"] = self.error
        return data
