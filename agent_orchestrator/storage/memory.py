from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
import uuid

from ..core.types import ProgressEvent, TaskStatus


@dataclass
class TaskRecord:
    """A research or triage request tracked by the API."""
    kind: str  # "research" or "triage"
    query: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    events: List[ProgressEvent] = field(default_factory=list)
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def progress(self) -> Optional[Dict[str, Any]]:
        """Latest progress event, if any."""
        return self.events[-1].to_dict() if self.events else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.id,
            "kind": self.kind,
            "query": self.query,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "progress": self.progress,
            "events": [e.to_dict() for e in self.events],
            "result": self.result,
            "error": self.error,
        }


class TaskStore:
    """
    In-memory storage for task records.

    State lives only as long as the process.
    """

    def __init__(self):
        self._tasks: Dict[str, TaskRecord] = {}

    def create(self, kind: str, query: str) -> TaskRecord:
        task = TaskRecord(kind=kind, query=query)
        self._tasks[task.id] = task
        return task

    def get(self, task_id: str) -> Optional[TaskRecord]:
        return self._tasks.get(task_id)

    def list(self) -> List[TaskRecord]:
        return list(self._tasks.values())

    def delete(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    def start(self, task_id: str) -> None:
        self._update(task_id, status=TaskStatus.IN_PROGRESS)

    def add_event(self, task_id: str, event: ProgressEvent) -> None:
        task = self._tasks.get(task_id)
        if task:
            task.events.append(event)
            task.updated_at = datetime.now()

    def complete(self, task_id: str, result: Dict[str, Any]) -> None:
        self._update(task_id, status=TaskStatus.COMPLETED, result=result)

    def fail(self, task_id: str, error: str) -> None:
        self._update(task_id, status=TaskStatus.FAILED, error=error)

    def clear(self) -> None:
        self._tasks.clear()

    def _update(self, task_id: str, **changes: Any) -> None:
        task = self._tasks.get(task_id)
        if not task:
            return
        for name, value in changes.items():
            setattr(task, name, value)
        task.updated_at = datetime.now()


# Global task store instance
task_store = TaskStore()
