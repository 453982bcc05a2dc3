from __future__ import annotations

from core.models import Task, TaskDependency
from infra.db.models import TaskDependencyORM, TaskORM


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        title=task.title,
        parent_id=task.parent_id,
        site=task.site,
        status=task.status,
        progress=task.progress,
        start_date=task.start_date,
        deadline=task.deadline,
        description=task.description,
    )


def task_from_orm(obj: TaskORM) -> Task:
    return Task(
        id=obj.id,
        title=obj.title,
        parent_id=obj.parent_id,
        site=obj.site,
        status=obj.status,
        progress=obj.progress or 0,
        start_date=obj.start_date,
        deadline=obj.deadline,
        description=obj.description or "",
    )


def dependency_to_orm(dependency: TaskDependency) -> TaskDependencyORM:
    return TaskDependencyORM(
        id=dependency.id,
        predecessor_id=dependency.predecessor_id,
        successor_id=dependency.successor_id,
    )


def dependency_from_orm(obj: TaskDependencyORM) -> TaskDependency:
    return TaskDependency(
        id=obj.id,
        predecessor_id=obj.predecessor_id,
        successor_id=obj.successor_id,
    )


__all__ = [
    "task_to_orm",
    "task_from_orm",
    "dependency_to_orm",
    "dependency_from_orm",
]
