from __future__ import annotations

from typing import Any, List, Mapping, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency
from infra.db.models import TaskDependencyORM, TaskORM
from infra.db.task.mapper import (
    dependency_from_orm,
    dependency_to_orm,
    task_from_orm,
    task_to_orm,
)

_PATCHABLE_COLUMNS = frozenset(
    {"title", "parent_id", "site", "status", "progress", "start_date", "deadline", "description"}
)


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> Task:
        obj = task_to_orm(task)
        self.session.add(obj)
        self.session.flush()
        return task_from_orm(obj)

    def get(self, task_id: int) -> Optional[Task]:
        obj = self.session.get(TaskORM, task_id)
        return task_from_orm(obj) if obj else None

    def patch(self, task_id: int, changes: Mapping[str, Any]) -> Optional[Task]:
        unknown = set(changes) - _PATCHABLE_COLUMNS
        if unknown:
            raise ValidationError(f"Unknown task fields: {sorted(unknown)}", code="TASK_FIELD_UNKNOWN")
        obj = self.session.get(TaskORM, task_id)
        if obj is None:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        for name, value in changes.items():
            setattr(obj, name, value)
        self.session.flush()
        return task_from_orm(obj)

    def delete(self, task_id: int) -> None:
        self.session.query(TaskORM).filter_by(id=task_id).delete()

    def list_all(self) -> List[Task]:
        rows = self.session.execute(select(TaskORM).order_by(TaskORM.id)).scalars().all()
        return [task_from_orm(row) for row in rows]

    def children_of(self, task_id: int) -> List[Task]:
        stmt = select(TaskORM).where(TaskORM.parent_id == task_id).order_by(TaskORM.id)
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]


class SqlAlchemyDependencyRepository(DependencyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, dependency: TaskDependency) -> TaskDependency:
        obj = dependency_to_orm(dependency)
        self.session.add(obj)
        self.session.flush()
        return dependency_from_orm(obj)

    def get(self, dependency_id: int) -> Optional[TaskDependency]:
        obj = self.session.get(TaskDependencyORM, dependency_id)
        return dependency_from_orm(obj) if obj else None

    def delete(self, dependency_id: int) -> None:
        self.session.query(TaskDependencyORM).filter_by(id=dependency_id).delete()

    def delete_for_task(self, task_id: int) -> None:
        self.session.query(TaskDependencyORM).filter(
            or_(
                TaskDependencyORM.predecessor_id == task_id,
                TaskDependencyORM.successor_id == task_id,
            )
        ).delete(synchronize_session=False)

    def list_all(self) -> List[TaskDependency]:
        rows = self.session.execute(
            select(TaskDependencyORM).order_by(TaskDependencyORM.id)
        ).scalars().all()
        return [dependency_from_orm(row) for row in rows]

    def list_by_task(self, task_id: int) -> List[TaskDependency]:
        stmt = select(TaskDependencyORM).where(
            or_(
                TaskDependencyORM.predecessor_id == task_id,
                TaskDependencyORM.successor_id == task_id,
            )
        )
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyTaskRepository", "SqlAlchemyDependencyRepository"]
