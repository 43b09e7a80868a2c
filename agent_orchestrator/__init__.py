"""
Agent Orchestrator

Coordinates delegated work among specialized language-model agents:
- Execution adapter: runs one agent on one task and normalizes text output,
  schema-validated output and failures into a single result contract
- Handoff coordinator: a triage agent routes each request to at most one
  specialist, which sees the conversation without tool traffic
- Research pipeline: plan searches, run them concurrently, write a
  schema-validated report

Key Features:
- Azure OpenAI, OpenAI and Claude (Anthropic) providers
- Tool failures reported back to the model as text instead of aborting
- Partial-failure tolerant fan-out search with in-order results
- Progress events for presentation layers
"""

__version__ = "1.0.0"
__author__ = "Multi-Agent Research Team"
