from .errors import (
    OrchestratorError,
    ConfigurationError,
    ExecutionError,
    ExecutionErrorKind,
    SchemaValidationError,
    ToolError,
)
from .llm import LLMProvider, ModelSettings, create_llm_client, get_default_model
from .tools import Tool, AgentTool, ToolRef, ToolResult, ToolRegistry
from .types import (
    RouteState,
    TaskStatus,
    PipelineStage,
    ConversationMessage,
    AgentDescriptor,
    TextResult,
    StructuredResult,
    FailedResult,
    ExecutionResult,
    HandoffRecord,
    ProgressEvent,
)
from .adapter import AgentExecutor, validate_output
from .handoff import HandoffCoordinator, RouteOutcome, filter_history

__all__ = [
    "OrchestratorError",
    "ConfigurationError",
    "ExecutionError",
    "ExecutionErrorKind",
    "SchemaValidationError",
    "ToolError",
    "LLMProvider",
    "ModelSettings",
    "create_llm_client",
    "get_default_model",
    "Tool",
    "AgentTool",
    "ToolRef",
    "ToolResult",
    "ToolRegistry",
    "RouteState",
    "TaskStatus",
    "PipelineStage",
    "ConversationMessage",
    "AgentDescriptor",
    "TextResult",
    "StructuredResult",
    "FailedResult",
    "ExecutionResult",
    "HandoffRecord",
    "ProgressEvent",
    "AgentExecutor",
    "validate_output",
    "HandoffCoordinator",
    "RouteOutcome",
    "filter_history",
]
