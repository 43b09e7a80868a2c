from enum import Enum
from typing import Any, Dict, List, Optional


class ExecutionErrorKind(Enum):
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    MODEL = "model"
    MAX_TURNS = "max_turns"
    UNKNOWN = "unknown"


class OrchestratorError(Exception):
    """Base class for errors raised by the orchestration core."""


class ConfigurationError(OrchestratorError):
    """Required credentials or settings are absent."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class ExecutionError(OrchestratorError):
    """The underlying model invocation failed."""

    def __init__(self, kind: ExecutionErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}

    def __repr__(self) -> str:
        return f"ExecutionError(kind={self.kind.value!r}, message={self.message!r})"


class SchemaValidationError(OrchestratorError):
    """Structured output did not match the schema requested for it."""

    def __init__(self, schema_name: str, errors: List[str]):
        self.schema_name = schema_name
        self.errors = errors
        super().__init__(f"Output does not match {schema_name}: {'; '.join(errors)}")


class ToolError(OrchestratorError):
    """A tool failed. Tools may raise this to control the text the model sees."""
