from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from core.domain.enums import TaskStatus


@dataclass
class Task:
    id: int
    title: str
    parent_id: Optional[int] = None
    site: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    progress: int = 0
    start_date: Optional[date] = None
    deadline: Optional[date] = None
    description: str = ""

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_schedulable(self) -> bool:
        """Root tasks carrying a site take part in dependency scheduling."""
        return self.parent_id is None and bool((self.site or "").strip())


@dataclass
class TaskNode:
    task: Task
    depth: int = 1
    children: List["TaskNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.task.id

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class TaskDependency:
    id: Optional[int]
    predecessor_id: int
    successor_id: int

    @staticmethod
    def create(predecessor_id: int, successor_id: int) -> "TaskDependency":
        return TaskDependency(id=None, predecessor_id=predecessor_id, successor_id=successor_id)


__all__ = ["Task", "TaskNode", "TaskDependency"]
