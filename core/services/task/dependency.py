from __future__ import annotations

import logging
from typing import List, Optional

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import TaskDependency

logger = logging.getLogger(__name__)


class TaskDependencyMixin:
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository

    def add_dependency(self, predecessor_id: int, successor_id: int) -> TaskDependency:
        if self._task_repo.get(predecessor_id) is None:
            raise NotFoundError("Predecessor task not found.", code="TASK_NOT_FOUND")
        if self._task_repo.get(successor_id) is None:
            raise NotFoundError("Successor task not found.", code="TASK_NOT_FOUND")
        if predecessor_id == successor_id:
            raise ValidationError("A task cannot depend on itself.", code="DEPENDENCY_SELF")
        if any(
            d.predecessor_id == predecessor_id and d.successor_id == successor_id
            for d in self._dependency_repo.list_by_task(predecessor_id)
        ):
            raise ValidationError("This dependency already exists.", code="DEPENDENCY_DUPLICATE")
        self._check_no_circular_dependency(predecessor_id, successor_id)

        try:
            dep = self._dependency_repo.add(TaskDependency.create(predecessor_id, successor_id))
            self._commit()
        except Exception:
            self._rollback()
            raise

        logger.info(f"Added dependency {dep.id}: {predecessor_id} -> {successor_id}")
        domain_events.dependencies_changed.emit(dep.id)
        return dep

    def remove_dependency(self, dep_id: int) -> None:
        dep = self._dependency_repo.get(dep_id)
        if dep is None:
            raise NotFoundError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
        try:
            self._dependency_repo.delete(dep_id)
            self._commit()
        except Exception:
            self._rollback()
            raise
        logger.info(f"Removed dependency {dep_id}: {dep.predecessor_id} -> {dep.successor_id}")
        domain_events.dependencies_changed.emit(dep_id)

    def list_dependencies(self, task_id: Optional[int] = None) -> List[TaskDependency]:
        if task_id is None:
            return self._dependency_repo.list_all()
        return self._dependency_repo.list_by_task(task_id)
