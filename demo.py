#!/usr/bin/env python3
"""
Demo script for the Agent Orchestrator.

Runs the research pipeline or a triage request from the command line,
without needing the API server.

Usage:
    python demo.py research "What are the current developments in renewable energy?"
    python demo.py triage "Create a TypeScript function to sort an array"
    python demo.py --mock research "renewable energy trends"
"""

import sys
import json
import asyncio
import logging
import argparse
from pathlib import Path
from types import SimpleNamespace

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

from agent_orchestrator.agents import ResearchManager, create_triage_agent
from agent_orchestrator.config import Config
from agent_orchestrator.core import AgentExecutor, HandoffCoordinator, OrchestratorError
from agent_orchestrator.core.types import FailedResult, StructuredResult


def _response(content=None, tool_calls=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls, role="assistant")
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason="stop")])


def _tool_call(call_id, name, arguments):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=json.dumps(arguments)),
    )


class MockLLMClient:
    """Mock LLM client for demo without API keys."""

    def __init__(self):
        self.chat = self
        self.completions = self

    async def create(self, **kwargs):
        messages = kwargs.get("messages", [])
        system_msg = messages[0]["content"] if messages else ""
        user_msg = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "") or ""
        after_tool = messages[-1]["role"] == "tool"
        await asyncio.sleep(0.05)

        if "come up with a set of web searches" in system_msg:
            topic = user_msg.replace("Query:", "").strip()
            searches = [
                {"reason": f"Establish the {angle} picture", "query": f"{topic} {angle}"}
                for angle in ("market", "policy", "technology", "investment", "outlook")
            ]
            return _response(json.dumps({"searches": searches}))

        if "you search the web" in system_msg:
            if not after_tool:
                term = user_msg.splitlines()[0].replace("Search term:", "").strip()
                return _response(tool_calls=[_tool_call("call_search", "web_search", {"query": term})])
            return _response(
                "Strong growth, falling costs, policy support in most major markets. "
                "Grid integration and storage remain the main bottlenecks."
            )

        if "senior researcher" in system_msg:
            return _response(json.dumps({
                "short_summary": "The field is growing quickly, driven by falling costs and policy support.",
                "markdown_body": "# Findings\n\n## Growth\nCapacity additions keep accelerating.\n\n"
                                 "## Constraints\nStorage and grid integration lag behind generation.",
                "follow_up_questions": [
                    "How fast are storage costs falling?",
                    "Which grid upgrades unlock the most capacity?"
                ]
            }))

        if "triage agent" in system_msg:
            lowered = user_msg.lower()
            if any(word in lowered for word in ("code", "function", "class", "script")):
                target = "transfer_to_coding_agent"
            elif any(word in lowered for word in ("doc", "guide", "tutorial", "readme")):
                target = "transfer_to_documentation_agent"
            else:
                return _response("I can help with code or documentation. What do you need?")
            return _response(tool_calls=[_tool_call("call_handoff", target, {})])

        if "software development agent" in system_msg:
            if not after_tool:
                return _response(tool_calls=[_tool_call("call_code", "write_code", {
                    "task": user_msg, "language": "typescript", "style": "function"
                })])
            return _response(f"Here is your code:\n\n{messages[-1]['content']}")

        if "documentation agent" in system_msg:
            if not after_tool:
                return _response(tool_calls=[_tool_call("call_docs", "write_documentation", {
                    "topic": user_msg, "type": "guide"
                })])
            return _response(f"Here is your documentation:\n\n{messages[-1]['content']}")

        if "software engineer" in system_msg:
            return _response("export function sortNumbers(values: number[]): number[] {\n"
                             "  return [...values].sort((a, b) => a - b);\n}")

        return _response("# Guide\n\n1. Install the tooling.\n2. Create the project.\n3. Run it.")


def print_progress(event):
    print(f"   [{event.stage.value}] {event.message}")


async def run_research(query: str, config: Config, executor: AgentExecutor):
    print("\n🔍 Research Agent\n")
    manager = ResearchManager(config=config, executor=executor, on_progress=print_progress)
    report = await manager.run(query)

    print("\n\n=====REPORT SUMMARY=====\n")
    print(report.short_summary)
    print("\n\n=====REPORT=====\n")
    print(report.markdown_body)
    print("\n\n=====FOLLOW UP QUESTIONS=====\n")
    print("\n".join(report.follow_up_questions))


async def run_triage(request: str, config: Config, executor: AgentExecutor):
    print("\n🎯 Triage Agent\n")
    outcome = await HandoffCoordinator(executor).dispatch(create_triage_agent(config), request)

    if outcome.handoff:
        print(f"➡️  Handed off to {outcome.handoff.target_agent}")
    else:
        print("↩️  Answered directly by triage")

    result = outcome.result
    if isinstance(result, FailedResult):
        print(f"\n❌ Agent failed ({result.error.kind.value}): {result.error.message}")
    elif isinstance(result, StructuredResult):
        print(f"\n✅ {result.agent_name} completed:\n{result.value.model_dump_json(indent=2)}")
    else:
        print(f"\n✅ {result.agent_name} completed:\n{result.text}")


def main():
    parser = argparse.ArgumentParser(description="Agent Orchestrator demo")
    parser.add_argument("--mock", action="store_true", help="Use a scripted LLM instead of a real provider")
    parser.add_argument("mode", choices=["research", "triage"])
    parser.add_argument("text", help="Research query or triage request")
    args = parser.parse_args()

    config = Config.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.mock:
        config = Config(llm_provider="openai", openai_api_key="mock", llm_model="mock-model")
        executor = AgentExecutor(client_factory=lambda settings: MockLLMClient())
    else:
        executor = AgentExecutor(max_turns=config.max_turns)

    runner = run_research if args.mode == "research" else run_triage
    try:
        asyncio.run(runner(args.text, config, executor))
    except OrchestratorError as e:
        print(f"\n❌ {type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
