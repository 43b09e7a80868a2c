"""
Agent execution adapter.

Runs one AgentDescriptor against one task and normalizes the outcome:

- no output schema: ``TextResult`` on success, ``FailedResult`` on failure.
  Nothing is raised in this mode.
- output schema: ``StructuredResult`` on success. Execution failures raise
  ``ExecutionError`` and schema mismatches raise ``SchemaValidationError``.

Tool failures never fail the invocation; the model receives the error text
as the tool's output and carries on.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Type
from dataclasses import dataclass

from pydantic import BaseModel, ValidationError

from .errors import (
    ConfigurationError,
    ExecutionError,
    ExecutionErrorKind,
    OrchestratorError,
    SchemaValidationError,
)
from .llm import ModelSettings, classify_error, create_llm_client
from .tools import AgentTool, Tool, ToolRegistry, ToolResult
from .types import (
    AgentDescriptor,
    ConversationMessage,
    ExecutionResult,
    FailedResult,
    StructuredResult,
    TextResult,
)
from .utils import clean_json_response, transfer_tool_name

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ModelSettings], Any]

DEFAULT_MAX_TURNS = 10
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4096


@dataclass
class ConversationOutcome:
    """Raw outcome of the reasoning loop, before normalization."""
    output: str
    transcript: List[ConversationMessage]
    handoff_to: Optional[AgentDescriptor] = None


def validate_output(schema: Type[BaseModel], data: Any) -> BaseModel:
    """
    Validate model output against ``schema``.

    ``data`` may be raw model text (optionally fenced in a markdown code
    block) or an already decoded value.

    Raises:
        SchemaValidationError: when the output is not JSON or does not match.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError:
            # Raw JSON first: string values may contain code fences.
            try:
                data = json.loads(clean_json_response(data))
            except json.JSONDecodeError as e:
                raise SchemaValidationError(schema.__name__, [f"output is not valid JSON ({e})"]) from e

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise SchemaValidationError(schema.__name__, errors) from e


def _transfer_tool_spec(target: AgentDescriptor) -> Dict[str, Any]:
    description = f"Handoff to the {target.name} agent to handle the request."
    if target.handoff_description:
        description += f" {target.handoff_description}"
    return {
        "type": "function",
        "function": {
            "name": transfer_tool_name(target.name),
            "description": description,
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    }


class AgentExecutor:
    """Runs agent descriptors against the configured LLM providers."""

    def __init__(
        self,
        client_factory: ClientFactory = create_llm_client,
        max_turns: int = DEFAULT_MAX_TURNS
    ):
        self.client_factory = client_factory
        self.max_turns = max_turns

    async def execute(
        self,
        descriptor: AgentDescriptor,
        task: str,
        history: Optional[Sequence[ConversationMessage]] = None
    ) -> ExecutionResult:
        """Run ``descriptor`` on ``task``, optionally after prior conversation turns."""
        messages = list(history or [])
        messages.append(ConversationMessage(role="user", content=task or ""))
        return await self.execute_messages(descriptor, messages)

    async def execute_messages(
        self,
        descriptor: AgentDescriptor,
        messages: Sequence[ConversationMessage]
    ) -> ExecutionResult:
        start_time = time.time()
        try:
            outcome = await self.run_conversation(descriptor, messages)
        except ExecutionError as e:
            if descriptor.output_schema is not None:
                raise
            logger.warning("Agent %s failed (%s): %s", descriptor.name, e.kind.value, e.message)
            return FailedResult(
                error=e,
                agent_name=descriptor.name,
                execution_time_ms=int((time.time() - start_time) * 1000)
            )
        return self.finalize(descriptor, outcome.output, start_time)

    def finalize(self, descriptor: AgentDescriptor, output: str, start_time: float) -> ExecutionResult:
        """Turn a final model output into a Text or Structured result."""
        execution_time = int((time.time() - start_time) * 1000)
        if descriptor.output_schema is None:
            return TextResult(text=output, agent_name=descriptor.name, execution_time_ms=execution_time)

        value = validate_output(descriptor.output_schema, output)
        return StructuredResult(value=value, agent_name=descriptor.name, execution_time_ms=execution_time)

    async def run_conversation(
        self,
        descriptor: AgentDescriptor,
        messages: Sequence[ConversationMessage],
        handoffs: Sequence[AgentDescriptor] = ()
    ) -> ConversationOutcome:
        """
        Drive the reasoning/tool loop until the model answers or hands off.

        ``handoffs`` are offered to the model as ``transfer_to_*`` functions.
        The first transfer the model calls ends the loop; the caller decides
        what to do with ``ConversationOutcome.handoff_to``.

        Raises:
            ExecutionError: client construction or a model call failed, or
                the turn budget ran out.
        """
        try:
            client = self.client_factory(descriptor.model)
        except ConfigurationError as e:
            raise ExecutionError(ExecutionErrorKind.CONFIGURATION, str(e)) from e

        registry = ToolRegistry([t for t in descriptor.tools if isinstance(t, Tool)])
        agent_tools = {t.name: t for t in descriptor.tools if isinstance(t, AgentTool)}
        transfers = {transfer_tool_name(t.name): t for t in handoffs}
        tool_specs = [t.to_openai_format() for t in descriptor.tools]
        tool_specs.extend(_transfer_tool_spec(t) for t in handoffs)

        transcript = list(messages)
        llm_messages: List[Dict[str, Any]] = [
            {"role": "system", "content": self._system_prompt(descriptor)}
        ]
        llm_messages.extend(m.to_llm_message() for m in messages)

        max_turns = descriptor.hint("max_turns", self.max_turns)
        reasoning = descriptor.hint("reasoning_model", descriptor.model.reasoning)
        for turn in range(max_turns):
            kwargs: Dict[str, Any] = {
                "model": descriptor.model.model,
                "messages": llm_messages,
            }
            if reasoning:
                kwargs["max_completion_tokens"] = descriptor.hint("max_tokens", DEFAULT_MAX_TOKENS)
            else:
                kwargs["temperature"] = descriptor.hint("temperature", DEFAULT_TEMPERATURE)
                kwargs["max_tokens"] = descriptor.hint("max_tokens", DEFAULT_MAX_TOKENS)
            if tool_specs:
                kwargs["tools"] = tool_specs
                # A forced tool call only applies to the opening turn, otherwise the loop never ends.
                kwargs["tool_choice"] = descriptor.hint("tool_choice", "auto") if turn == 0 else "auto"
            elif descriptor.output_schema is not None:
                kwargs["response_format"] = {"type": "json_object"}

            try:
                response = await client.chat.completions.create(**kwargs)
            except Exception as e:
                raise ExecutionError(classify_error(e), f"LLM call failed: {e}") from e

            try:
                message = response.choices[0].message
            except (AttributeError, IndexError, TypeError) as e:
                raise ExecutionError(ExecutionErrorKind.MODEL, f"LLM returned no message: {e!r}") from e
            tool_calls = getattr(message, "tool_calls", None)

            if not tool_calls:
                content = message.content or ""
                transcript.append(ConversationMessage(
                    role="assistant", content=content, agent_id=descriptor.name
                ))
                return ConversationOutcome(output=content, transcript=transcript)

            calls = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.function.name, "arguments": tc.function.arguments},
                }
                for tc in tool_calls
            ]
            assistant_turn = ConversationMessage(
                role="assistant",
                content=message.content or None,
                tool_calls=calls,
                agent_id=descriptor.name
            )
            transcript.append(assistant_turn)
            llm_messages.append(assistant_turn.to_llm_message())

            handoff_to = None
            for call in calls:
                name = call["function"]["name"]
                if name in transfers:
                    if handoff_to is None:
                        handoff_to = transfers[name]
                        content = json.dumps({"assistant": handoff_to.name})
                    else:
                        content = "Multiple handoffs detected, ignoring this one."
                else:
                    content = await self._run_tool(
                        name, call["function"]["arguments"], registry, agent_tools
                    )

                tool_turn = ConversationMessage(
                    role="tool",
                    content=content,
                    tool_call_id=call["id"],
                    agent_id=descriptor.name
                )
                transcript.append(tool_turn)
                llm_messages.append(tool_turn.to_llm_message())

            if handoff_to is not None:
                return ConversationOutcome(output="", transcript=transcript, handoff_to=handoff_to)

        raise ExecutionError(
            ExecutionErrorKind.MAX_TURNS,
            f"Agent {descriptor.name} did not finish within {max_turns} turns"
        )

    def _system_prompt(self, descriptor: AgentDescriptor) -> str:
        if descriptor.output_schema is None:
            return descriptor.instructions
        schema = json.dumps(descriptor.output_schema.model_json_schema(), indent=2)
        return (
            f"{descriptor.instructions}\n\n"
            "Respond ONLY with a JSON object that matches this JSON schema:\n"
            f"{schema}"
        )

    async def _run_tool(
        self,
        name: str,
        arguments: Any,
        registry: ToolRegistry,
        agent_tools: Dict[str, AgentTool]
    ) -> str:
        try:
            if isinstance(arguments, str):
                args = json.loads(arguments) if arguments.strip() else {}
            else:
                args = dict(arguments or {})
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("Tool %s called with unreadable arguments: %s", name, e)
            return ToolResult(name, False, None, f"invalid arguments ({e})").to_model_content()
        if not isinstance(args, dict):
            return ToolResult(name, False, None, "arguments must be a JSON object").to_model_content()

        if name in agent_tools:
            return await self._run_agent_tool(agent_tools[name], args)

        result = await registry.execute(name, **args)
        return result.to_model_content()

    async def _run_agent_tool(self, tool: AgentTool, args: Dict[str, Any]) -> str:
        try:
            descriptor, task = tool.build(**args)
            result = await self.execute(descriptor, task)
        except (OrchestratorError, TypeError, ValueError) as e:
            logger.warning("Agent tool %s failed: %s", tool.name, e)
            return ToolResult(tool.name, False, None, str(e)).to_model_content()

        if isinstance(result, FailedResult):
            return ToolResult(tool.name, False, None, result.error.message).to_model_content()

        if isinstance(result, StructuredResult):
            text = result.value.model_dump_json()
        else:
            text = result.text

        if tool.format_output:
            text = tool.format_output(text, args)
        return text
