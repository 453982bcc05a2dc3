from __future__ import annotations

from dataclasses import replace
from itertools import count
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.exceptions import NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency

_PATCHABLE_FIELDS = frozenset(
    {"title", "parent_id", "site", "status", "progress", "start_date", "deadline", "description"}
)


class InMemoryTaskStore(TaskRepository):
    """Snapshot store for callers that hand the engine plain task lists."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: Dict[int, Task] = {}
        self._lock = RLock()
        for task in tasks:
            self._tasks[task.id] = task
        self._ids = count(max(self._tasks, default=0) + 1)

    def add(self, task: Task) -> Task:
        with self._lock:
            if task.id is None:
                task = replace(task, id=next(self._ids))
            self._tasks[task.id] = task
            return task

    def get(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    def patch(self, task_id: int, changes: Mapping[str, Any]) -> Optional[Task]:
        unknown = set(changes) - _PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown task fields: {sorted(unknown)}", code="TASK_FIELD_UNKNOWN")
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
            for name, value in changes.items():
                setattr(task, name, value)
            return task

    def delete(self, task_id: int) -> None:
        with self._lock:
            self._tasks.pop(task_id, None)

    def list_all(self) -> List[Task]:
        return list(self._tasks.values())

    def children_of(self, task_id: int) -> List[Task]:
        return [t for t in self._tasks.values() if t.parent_id == task_id]


class InMemoryDependencyStore(DependencyRepository):
    def __init__(self, dependencies: Iterable[TaskDependency] = ()):
        dependencies = list(dependencies)
        self._deps: Dict[int, TaskDependency] = {}
        self._ids = count(max((d.id for d in dependencies if d.id is not None), default=0) + 1)
        for dep in dependencies:
            self.add(dep)

    def add(self, dependency: TaskDependency) -> TaskDependency:
        if dependency.id is None:
            dependency = replace(dependency, id=next(self._ids))
        self._deps[dependency.id] = dependency
        return dependency

    def get(self, dependency_id: int) -> Optional[TaskDependency]:
        return self._deps.get(dependency_id)

    def delete(self, dependency_id: int) -> None:
        self._deps.pop(dependency_id, None)

    def delete_for_task(self, task_id: int) -> None:
        for dep in self.list_by_task(task_id):
            self._deps.pop(dep.id, None)

    def list_all(self) -> List[TaskDependency]:
        return list(self._deps.values())

    def list_by_task(self, task_id: int) -> List[TaskDependency]:
        return [
            d for d in self._deps.values()
            if d.predecessor_id == task_id or d.successor_id == task_id
        ]


__all__ = ["InMemoryTaskStore", "InMemoryDependencyStore"]
