from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union
from dataclasses import dataclass, field, replace
from datetime import datetime

from pydantic import BaseModel

from .errors import ExecutionError
from .llm import ModelSettings
from .tools import ToolRef


class RouteState(Enum):
    IDLE = "idle"
    TRIAGING = "triaging"
    DELEGATED = "delegated"
    DIRECT = "direct"
    COMPLETED = "completed"


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineStage(Enum):
    PLANNING = "planning"
    SEARCHING = "searching"
    WRITING = "writing"
    COMPLETE = "complete"


@dataclass
class ConversationMessage:
    role: str  # "user", "assistant", "system", "tool"
    content: Optional[str]
    timestamp: datetime = field(default_factory=datetime.now)
    agent_id: Optional[str] = None
    tool_calls: Optional[List[Dict[str, Any]]] = None  # OpenAI "tool_calls" entries
    tool_call_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_tool_turn(self) -> bool:
        """True for a tool invocation (assistant turn carrying tool calls) or a tool result."""
        return self.role == "tool" or bool(self.tool_calls)

    def to_llm_message(self) -> Dict[str, Any]:
        message: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = self.tool_calls
        if self.tool_call_id:
            message["tool_call_id"] = self.tool_call_id
        return message


def _frozen_hints(hints: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(hints or {}))


@dataclass(frozen=True)
class AgentDescriptor:
    """
    Immutable configuration for one agent invocation.

    Descriptors are cheap value objects. Build a fresh one per invocation
    instead of sharing one across concurrent calls.

    execution_hints understood by the executor:
        tool_choice  - "auto" (default) or "required" for the first turn
        temperature  - sampling temperature
        max_tokens   - completion budget per turn
        max_turns    - reasoning/tool turns before giving up
        reasoning_model - send max_completion_tokens and no temperature
                       (defaults to ``model.reasoning``)
    """
    name: str
    instructions: str
    model: ModelSettings
    tools: Tuple[ToolRef, ...] = ()
    handoffs: Tuple["AgentDescriptor", ...] = ()
    output_schema: Optional[Type[BaseModel]] = None
    execution_hints: Mapping[str, Any] = field(default_factory=_frozen_hints)
    handoff_description: str = ""

    def __post_init__(self):
        # Normalize caller-supplied lists/dicts so nothing mutable is retained.
        object.__setattr__(self, "tools", tuple(self.tools))
        object.__setattr__(self, "handoffs", tuple(self.handoffs))
        object.__setattr__(self, "execution_hints", _frozen_hints(self.execution_hints))

    def hint(self, key: str, default: Any = None) -> Any:
        return self.execution_hints.get(key, default)

    def clone(self, **changes: Any) -> "AgentDescriptor":
        return replace(self, **changes)


@dataclass(frozen=True)
class TextResult:
    text: str
    agent_name: str = ""
    execution_time_ms: int = 0

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class StructuredResult:
    value: BaseModel
    agent_name: str = ""
    execution_time_ms: int = 0

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class FailedResult:
    error: ExecutionError
    agent_name: str = ""
    execution_time_ms: int = 0

    @property
    def success(self) -> bool:
        return False


ExecutionResult = Union[TextResult, StructuredResult, FailedResult]


def result_to_dict(result: ExecutionResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "agent_name": result.agent_name,
        "success": result.success,
        "execution_time_ms": result.execution_time_ms,
    }
    if isinstance(result, TextResult):
        data["output"] = result.text
    elif isinstance(result, StructuredResult):
        data["output"] = result.value.model_dump()
    else:
        data["error"] = result.error.to_dict()
    return data


@dataclass(frozen=True)
class HandoffRecord:
    """Exists only while one delegation is carried out."""
    source_agent: str
    target_agent: str
    filtered_history: Tuple[ConversationMessage, ...]


@dataclass(frozen=True)
class ProgressEvent:
    stage: PipelineStage
    completed: int
    total: int
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "completed": self.completed,
            "total": self.total,
            "message": self.message,
        }
