from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..config import Config
from ..core.types import AgentDescriptor
from .tools import create_web_search_tool


# ---- Planner Agent ----

PLANNER_PROMPT = """You are a helpful research assistant.
Given a query, come up with a set of web searches to perform to best answer the query.
Output between {min_searches} and {max_searches} terms to query for."""


class SearchItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str = Field(description="Your reasoning for why this search is important to the query.")
    query: str = Field(description="The search term to use for the web search.")


class SearchPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    searches: List[SearchItem] = Field(
        description="A list of web searches to perform to best answer the query."
    )


def create_planner_agent(config: Config) -> AgentDescriptor:
    return AgentDescriptor(
        name="PlannerAgent",
        instructions=PLANNER_PROMPT.format(
            min_searches=config.min_searches,
            max_searches=config.max_searches,
        ),
        model=config.model_settings(),
        output_schema=SearchPlan,
        execution_hints={"max_turns": config.max_turns},
    )


# ---- Search Agent ----

SEARCH_PROMPT = """You are a research assistant.
Given a search term, you search the web for that term and produce a concise summary of the results.
The summary must be 2-3 paragraphs and less than 300 words. Capture the main points.
Write succinctly, no need to have complete sentences or good grammar.
This will be consumed by someone synthesizing a report, so its vital you capture the essence and ignore any fluff.
Do not include any additional commentary other than the summary itself."""


def create_search_agent(config: Config) -> AgentDescriptor:
    return AgentDescriptor(
        name="Search agent",
        instructions=SEARCH_PROMPT,
        model=config.model_settings(),
        tools=(create_web_search_tool(config),),
        execution_hints={"tool_choice": "required", "max_turns": config.max_turns},
    )


# ---- Writer Agent ----

WRITER_PROMPT = """You are a senior researcher tasked with writing a cohesive report for a research query.
You will be provided with the original query, and some initial research done by a research assistant.
You should first come up with an outline for the report that describes the structure and flow of the report.
Then, generate the report and return that as your final output.
The final output should be in markdown format, and it should be lengthy and detailed. Aim for 5-10 pages of content, at least 1000 words."""


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    short_summary: str = Field(description="A short 2-3 sentence summary of the findings.")
    markdown_body: str = Field(description="The final report")
    follow_up_questions: List[str] = Field(description="Suggested topics to research further")


def create_writer_agent(config: Config) -> AgentDescriptor:
    return AgentDescriptor(
        name="WriterAgent",
        instructions=WRITER_PROMPT,
        model=config.model_settings(),
        output_schema=Report,
        execution_hints={"max_tokens": 16384, "max_turns": config.max_turns},
    )
