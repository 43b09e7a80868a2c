from .research_agents import (
    SearchItem,
    SearchPlan,
    Report,
    create_planner_agent,
    create_search_agent,
    create_writer_agent,
)
from .research_manager import ResearchManager
from .triage_agent import (
    create_coding_agent,
    create_documentation_agent,
    create_triage_agent,
)
from .tools import WebSearch, create_web_search_tool

__all__ = [
    "SearchItem",
    "SearchPlan",
    "Report",
    "create_planner_agent",
    "create_search_agent",
    "create_writer_agent",
    "ResearchManager",
    "create_coding_agent",
    "create_documentation_agent",
    "create_triage_agent",
    "WebSearch",
    "create_web_search_tool",
]
