"""
Triage routing with single-hop handoffs.

A request moves IDLE -> TRIAGING -> (DELEGATED | DIRECT) -> COMPLETED.
The triage agent may hand the request to exactly one of its declared
handoff targets. Tool traffic never crosses the handoff boundary: the
target sees only the user/assistant turns of the conversation.
"""

import logging
import time
from typing import List, Optional, Sequence
from dataclasses import dataclass, field

from .adapter import AgentExecutor
from .errors import ExecutionError
from .types import (
    AgentDescriptor,
    ConversationMessage,
    ExecutionResult,
    FailedResult,
    HandoffRecord,
    RouteState,
)

logger = logging.getLogger(__name__)

CONVERSATION_ROLES = ("user", "assistant")


def filter_history(history: Sequence[ConversationMessage]) -> List[ConversationMessage]:
    """Keep only natural-language user/assistant turns: no tool traffic, no system turns."""
    return [
        message for message in history
        if message.role in CONVERSATION_ROLES and not message.is_tool_turn
    ]


@dataclass
class RouteOutcome:
    """What happened to one routed request."""
    result: ExecutionResult
    decision: Optional[RouteState] = None  # DELEGATED or DIRECT; None if triage itself failed
    handoff: Optional[HandoffRecord] = None
    transitions: List[RouteState] = field(default_factory=list)

    @property
    def state(self) -> RouteState:
        return self.transitions[-1] if self.transitions else RouteState.IDLE

    @property
    def agent_name(self) -> str:
        return self.result.agent_name


class HandoffCoordinator:
    """Routes requests through a triage agent to at most one specialist."""

    def __init__(self, executor: Optional[AgentExecutor] = None):
        self.executor = executor or AgentExecutor()

    async def route(
        self,
        triage: AgentDescriptor,
        request_text: str,
        history: Optional[Sequence[ConversationMessage]] = None
    ) -> ExecutionResult:
        outcome = await self.dispatch(triage, request_text, history)
        return outcome.result

    async def dispatch(
        self,
        triage: AgentDescriptor,
        request_text: str,
        history: Optional[Sequence[ConversationMessage]] = None
    ) -> RouteOutcome:
        """Like ``route`` but also reports the routing decision and handoff record."""
        transitions = [RouteState.IDLE, RouteState.TRIAGING]
        messages = list(history or [])
        messages.append(ConversationMessage(role="user", content=request_text or ""))

        start_time = time.time()
        try:
            conversation = await self.executor.run_conversation(
                triage, messages, handoffs=triage.handoffs
            )
        except ExecutionError as e:
            if triage.output_schema is not None:
                raise
            logger.warning("Triage agent %s failed: %s", triage.name, e.message)
            transitions.append(RouteState.COMPLETED)
            return RouteOutcome(
                result=FailedResult(
                    error=e,
                    agent_name=triage.name,
                    execution_time_ms=int((time.time() - start_time) * 1000)
                ),
                transitions=transitions
            )

        target = conversation.handoff_to
        if target is None:
            transitions.append(RouteState.DIRECT)
            logger.info("Triage agent %s answered directly", triage.name)
            result = self.executor.finalize(triage, conversation.output, start_time)
            transitions.append(RouteState.COMPLETED)
            return RouteOutcome(result=result, decision=RouteState.DIRECT, transitions=transitions)

        transitions.append(RouteState.DELEGATED)
        handoff = HandoffRecord(
            source_agent=triage.name,
            target_agent=target.name,
            filtered_history=tuple(filter_history(conversation.transcript)),
        )
        logger.info(
            "Handing off from %s to %s with %d of %d turns",
            handoff.source_agent,
            handoff.target_agent,
            len(handoff.filtered_history),
            len(conversation.transcript),
        )

        # The target runs without its own handoffs being offered: no re-delegation.
        result = await self.executor.execute_messages(target, handoff.filtered_history)
        transitions.append(RouteState.COMPLETED)
        return RouteOutcome(
            result=result,
            decision=RouteState.DELEGATED,
            handoff=handoff,
            transitions=transitions
        )
