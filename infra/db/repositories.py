# infra/db/repositories.py
from __future__ import annotations

from infra.db.task.mapper import (
    dependency_from_orm,
    dependency_to_orm,
    task_from_orm,
    task_to_orm,
)
from infra.db.task.repository import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyTaskRepository,
)

__all__ = [
    "task_to_orm",
    "task_from_orm",
    "dependency_to_orm",
    "dependency_from_orm",
    "SqlAlchemyTaskRepository",
    "SqlAlchemyDependencyRepository",
]
