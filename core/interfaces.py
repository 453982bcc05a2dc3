from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from core.models import Task, TaskDependency


class TaskRepository(ABC):
    """Store contract shared by the rollup engine and the task service."""

    @abstractmethod
    def add(self, task: Task) -> Task: ...

    @abstractmethod
    def get(self, task_id: int) -> Optional[Task]: ...

    @abstractmethod
    def patch(self, task_id: int, changes: Mapping[str, Any]) -> Optional[Task]: ...

    @abstractmethod
    def delete(self, task_id: int) -> None: ...

    @abstractmethod
    def list_all(self) -> List[Task]: ...

    @abstractmethod
    def children_of(self, task_id: int) -> List[Task]: ...

    def parent_of(self, task_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is None or task.parent_id is None:
            return None
        return self.get(task.parent_id)


class DependencyRepository(ABC):
    @abstractmethod
    def add(self, dependency: TaskDependency) -> TaskDependency: ...

    @abstractmethod
    def get(self, dependency_id: int) -> Optional[TaskDependency]: ...

    @abstractmethod
    def delete(self, dependency_id: int) -> None: ...

    @abstractmethod
    def delete_for_task(self, task_id: int) -> None: ...

    @abstractmethod
    def list_all(self) -> List[TaskDependency]: ...

    @abstractmethod
    def list_by_task(self, task_id: int) -> List[TaskDependency]: ...


__all__ = ["TaskRepository", "DependencyRepository"]
