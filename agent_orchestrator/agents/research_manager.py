import asyncio
import logging
from typing import Callable, List, Optional

from ..config import Config
from ..core.adapter import AgentExecutor
from ..core.errors import SchemaValidationError
from ..core.types import FailedResult, PipelineStage, ProgressEvent, StructuredResult, TextResult
from .research_agents import (
    Report,
    SearchItem,
    SearchPlan,
    create_planner_agent,
    create_search_agent,
    create_writer_agent,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]

SEARCH_RESULT_SEPARATOR = "\n\n"


class ResearchManager:
    """
    Plan -> fan-out search -> write.

    Stages run strictly in order. Planning and writing fail the whole run
    (ExecutionError / SchemaValidationError propagate); individual searches
    that fail are dropped and never retried.

    Progress is published as ProgressEvent objects through ``on_progress``.
    During the search stage ``completed`` counts result slots resolved in
    plan order, so it is non-decreasing and ends at the plan size.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        executor: Optional[AgentExecutor] = None,
        on_progress: Optional[ProgressCallback] = None,
        max_concurrency: Optional[int] = None
    ):
        self.config = config or Config.from_env()
        self.executor = executor or AgentExecutor(max_turns=self.config.max_turns)
        self.on_progress = on_progress
        concurrency = max_concurrency if max_concurrency is not None else self.config.search_concurrency
        self.max_concurrency = concurrency if concurrency and concurrency > 0 else None

    async def run(self, query: str) -> Report:
        logger.info("Starting research for %r", query)
        search_plan = await self.plan_searches(query)
        search_results = await self.perform_searches(search_plan)
        report = await self.write_report(query, search_results)
        self._emit(PipelineStage.COMPLETE, 1, 1, "Research complete")
        return report

    async def plan_searches(self, query: str) -> SearchPlan:
        self._emit(PipelineStage.PLANNING, 0, 1, "Planning searches...")
        planner = create_planner_agent(self.config)
        result = await self.executor.execute(planner, f"Query: {query}")
        plan = self._structured(result, SearchPlan)

        count = len(plan.searches)
        low, high = self.config.min_searches, self.config.max_searches
        if not low <= count <= high:
            raise SchemaValidationError(
                SearchPlan.__name__,
                [f"searches: expected between {low} and {high} items, got {count}"]
            )

        self._emit(PipelineStage.PLANNING, 1, 1, f"Will perform {count} searches")
        return plan

    async def perform_searches(self, search_plan: SearchPlan) -> List[str]:
        """Search every plan item concurrently; return surviving summaries in plan order."""
        outcomes = await self.search_outcomes(search_plan)
        return [outcome for outcome in outcomes if outcome is not None]

    async def search_outcomes(self, search_plan: SearchPlan) -> List[Optional[str]]:
        """One slot per plan item, in plan order; ``None`` where the search failed."""
        total = len(search_plan.searches)
        self._emit(PipelineStage.SEARCHING, 0, total, "Searching...")

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        # Every search is started before any is awaited.
        tasks = [
            asyncio.create_task(self._search(item, semaphore))
            for item in search_plan.searches
        ]

        outcomes: List[Optional[str]] = []
        for num_completed, task in enumerate(tasks, start=1):
            outcomes.append(await task)
            self._emit(
                PipelineStage.SEARCHING,
                num_completed,
                total,
                f"Searching... {num_completed}/{total} completed"
            )

        failed = outcomes.count(None)
        if failed:
            logger.warning("%d of %d searches failed and were dropped", failed, total)
        return outcomes

    async def _search(self, item: SearchItem, semaphore: Optional[asyncio.Semaphore] = None) -> Optional[str]:
        task = f"Search term: {item.query}\nReason for searching: {item.reason}"
        try:
            search_agent = create_search_agent(self.config)
            if semaphore is None:
                result = await self.executor.execute(search_agent, task)
            else:
                async with semaphore:
                    result = await self.executor.execute(search_agent, task)
        except Exception as e:
            logger.warning("Search for %r failed: %s", item.query, e)
            return None

        if isinstance(result, FailedResult):
            logger.warning("Search for %r failed: %s", item.query, result.error.message)
            return None
        if isinstance(result, StructuredResult):
            return result.value.model_dump_json()
        return result.text.strip()

    async def write_report(self, query: str, search_results: List[str]) -> Report:
        self._emit(PipelineStage.WRITING, 0, 1, "Thinking about report...")
        task = (
            f"Original query: {query}\n"
            f"Summarized search results: {SEARCH_RESULT_SEPARATOR.join(search_results)}"
        )
        writer = create_writer_agent(self.config)
        result = await self.executor.execute(writer, task)
        report = self._structured(result, Report)
        self._emit(PipelineStage.WRITING, 1, 1, "done")
        return report

    def _structured(self, result, schema):
        # Structured-mode execution raises on failure; anything else is a wiring error.
        if isinstance(result, StructuredResult) and isinstance(result.value, schema):
            return result.value
        if isinstance(result, TextResult):
            raise SchemaValidationError(schema.__name__, ["agent returned free text"])
        raise SchemaValidationError(schema.__name__, [f"unexpected result {result!r}"])

    def _emit(self, stage: PipelineStage, completed: int, total: int, message: str) -> None:
        logger.info("[%s] %s", stage.value, message)
        if self.on_progress is not None:
            self.on_progress(ProgressEvent(stage=stage, completed=completed, total=total, message=message))
