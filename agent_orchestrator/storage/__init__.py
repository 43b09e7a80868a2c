from .memory import TaskRecord, TaskStore, task_store

__all__ = ["TaskRecord", "TaskStore", "task_store"]
