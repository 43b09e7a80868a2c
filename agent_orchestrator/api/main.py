import logging
from typing import List, Literal, Optional
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, BackgroundTasks
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..agents import ResearchManager, create_triage_agent
from ..config import config
from ..core.adapter import AgentExecutor
from ..core.errors import ConfigurationError, OrchestratorError
from ..core.handoff import HandoffCoordinator
from ..core.types import ConversationMessage, result_to_dict
from ..storage.memory import task_store

logger = logging.getLogger(__name__)


# Request Models
class ResearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="The research query to investigate")


class HistoryTurn(BaseModel):
    role: Literal["user", "assistant"] = Field(..., description="'user' or 'assistant'")
    content: str


class TriageRequest(BaseModel):
    request: str = Field(..., min_length=1, description="What the user needs help with")
    history: List[HistoryTurn] = Field(default_factory=list, description="Earlier conversation turns")


def get_executor() -> AgentExecutor:
    return AgentExecutor(max_turns=config.max_turns)


def create_research_manager(task_id: Optional[str] = None) -> ResearchManager:
    on_progress = None
    if task_id is not None:
        def on_progress(event):
            task_store.add_event(task_id, event)
    return ResearchManager(config=config, executor=get_executor(), on_progress=on_progress)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = config.missing_settings()
    if missing:
        logger.warning("Missing configuration: %s", ", ".join(missing))
    logger.info("Agent orchestrator API starting (provider: %s)", config.llm_provider)
    yield
    logger.info("Agent orchestrator API shutting down")


app = FastAPI(
    title="Agent Orchestrator",
    description="""
    Coordinates specialized language-model agents:
    - **Research pipeline**: plan searches, run them concurrently, write a structured report
    - **Triage**: route a request to the documentation or coding specialist
    """,
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _http_error(error: Exception) -> HTTPException:
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


@app.get("/")
@app.get("/api")
async def api_info():
    """API info endpoint."""
    return {
        "name": "Agent Orchestrator",
        "version": __version__,
        "status": "running",
        "agents": ["planner", "search", "writer", "triage", "documentation", "coding"],
        "features": [
            "Concurrent web searches with partial-failure tolerance",
            "Schema-validated research reports",
            "Triage handoffs with tool-free history",
            "Progress events per research task",
        ]
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    missing = config.missing_settings()
    return {
        "status": "healthy" if not missing else "degraded",
        "timestamp": datetime.now().isoformat(),
        "llm_provider": config.llm_provider,
        "missing_settings": missing,
        "tavily_configured": bool(config.tavily_api_key)
    }


@app.post("/research")
async def create_research_task(request: ResearchRequest, background_tasks: BackgroundTasks):
    """
    Create a new research task.

    The task runs in the background. Use the returned task_id to check status.
    """
    task = task_store.create("research", request.query)
    background_tasks.add_task(run_research_task, task.id, request.query)

    return {
        "task_id": task.id,
        "status": task.status.value,
        "message": "Research task created. Use /research/{task_id}/status to check progress."
    }


async def run_research_task(task_id: str, query: str):
    """Background task to run the research pipeline."""
    task_store.start(task_id)
    try:
        report = await create_research_manager(task_id).run(query)
    except Exception as e:
        logger.exception("Research task %s failed", task_id)
        task_store.fail(task_id, str(e))
        return
    task_store.complete(task_id, report.model_dump())


@app.get("/research/{task_id}/status")
async def get_task_status(task_id: str):
    """Get the status and progress events of a research task."""
    task = task_store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task.to_dict()


@app.get("/research/{task_id}/result")
async def get_task_result(task_id: str):
    """Get the report of a completed research task."""
    task = task_store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    if task.result is None and task.error is None:
        return {
            "task_id": task_id,
            "status": task.status.value,
            "message": "Task not yet completed"
        }
    return {
        "task_id": task_id,
        "success": task.error is None,
        "result": task.result,
        "error": task.error,
    }


@app.post("/research/sync")
async def create_research_task_sync(request: ResearchRequest):
    """
    Run a research task and return the report.

    Warning: this may take several minutes for broad queries.
    """
    try:
        report = await create_research_manager().run(request.query)
    except OrchestratorError as e:
        raise _http_error(e)

    return {
        "success": True,
        "query": request.query,
        "report": report.model_dump()
    }


@app.post("/triage")
async def triage(request: TriageRequest):
    """Route a request to the documentation or coding specialist."""
    try:
        triage_agent = create_triage_agent(config)
        outcome = await HandoffCoordinator(get_executor()).dispatch(
            triage_agent,
            request.request,
            [ConversationMessage(role=turn.role, content=turn.content) for turn in request.history]
        )
    except OrchestratorError as e:
        raise _http_error(e)

    return {
        "decision": outcome.decision.value if outcome.decision else None,
        "handoff_to": outcome.handoff.target_agent if outcome.handoff else None,
        **result_to_dict(outcome.result)
    }


@app.get("/tasks")
async def list_tasks():
    """List all tasks."""
    return {"tasks": [task.to_dict() for task in task_store.list()]}


@app.delete("/tasks/{task_id}")
async def delete_task(task_id: str):
    """Delete a task."""
    if not task_store.delete(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "deleted", "task_id": task_id}
