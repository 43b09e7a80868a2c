from typing import TYPE_CHECKING, Any, Optional, Callable, Dict, List, Tuple, Union
from dataclasses import dataclass
import inspect
import json
import logging

if TYPE_CHECKING:
    from .types import AgentDescriptor

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Result from a tool execution."""
    tool_name: str
    success: bool
    result: Any
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool_name": self.tool_name,
            "success": self.success,
            "result": self.result,
            "error": self.error,
        }

    def to_model_content(self) -> str:
        """Text handed back to the model as the tool's output."""
        if not self.success:
            return f"Error running tool '{self.tool_name}': {self.error}"
        if isinstance(self.result, str):
            return self.result
        return json.dumps(self.result, default=str)


def _extract_parameters(func: Callable) -> Dict[str, Any]:
    """Extract a JSON schema parameter block from a function signature."""
    sig = inspect.signature(func)
    properties = {}
    required = []

    type_map = {
        str: "string",
        int: "integer",
        float: "number",
        bool: "boolean",
        list: "array",
        dict: "object",
    }

    for param_name, param in sig.parameters.items():
        if param_name == "self":
            continue

        param_type = "string"
        if param.annotation != inspect.Parameter.empty:
            param_type = type_map.get(param.annotation, "string")

        properties[param_name] = {
            "type": param_type,
            "description": f"The {param_name} parameter"
        }

        if param.default == inspect.Parameter.empty:
            required.append(param_name)

    return {
        "type": "object",
        "properties": properties,
        "required": required
    }


class Tool:
    """A Python callable that agents can invoke."""

    def __init__(
        self,
        name: str,
        description: str,
        func: Callable,
        parameters: Optional[Dict[str, Any]] = None
    ):
        self.name = name
        self.description = description
        self.func = func
        self.parameters = parameters or _extract_parameters(func)

    async def execute(self, /, **kwargs) -> ToolResult:
        """Execute the tool. Failures are returned, never raised."""
        try:
            result = self.func(**kwargs)
            if inspect.isawaitable(result):
                result = await result
            return ToolResult(tool_name=self.name, success=True, result=result)
        except Exception as e:
            logger.warning("Tool %s failed: %s", self.name, e)
            return ToolResult(tool_name=self.name, success=False, result=None, error=str(e))

    def to_openai_format(self) -> Dict[str, Any]:
        """Convert to OpenAI function calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


class AgentTool:
    """
    A tool whose body is another agent.

    ``build`` receives the tool arguments and returns the descriptor to run
    and the task to give it. The executor runs it and hands the text output
    (or the failure message) back to the calling agent.
    """

    def __init__(
        self,
        name: str,
        description: str,
        build: Callable[..., Tuple["AgentDescriptor", str]],
        parameters: Dict[str, Any],
        format_output: Optional[Callable[[str, Dict[str, Any]], str]] = None
    ):
        self.name = name
        self.description = description
        self.build = build
        self.parameters = parameters
        self.format_output = format_output

    def to_openai_format(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


ToolRef = Union[Tool, AgentTool]


class ToolRegistry:
    """Registry for the function tools available to one invocation."""

    def __init__(self, tools: Optional[List[Tool]] = None):
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        """List all registered tools."""
        return list(self._tools.values())

    def to_openai_format(self) -> List[Dict[str, Any]]:
        """Convert all tools to OpenAI format."""
        return [tool.to_openai_format() for tool in self._tools.values()]

    async def execute(self, tool_name: str, /, **kwargs) -> ToolResult:
        """Execute a tool by name. Arguments may use any name, including ``tool_name``."""
        tool = self.get(tool_name)
        if not tool:
            return ToolResult(
                tool_name=tool_name,
                success=False,
                result=None,
                error=f"Tool '{tool_name}' not found"
            )
        return await tool.execute(**kwargs)
