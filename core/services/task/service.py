from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from core.interfaces import DependencyRepository, TaskRepository
from core.services.common.base import ServiceBase
from core.services.progress.rollup import ProgressRollupEngine
from core.services.task.dependency import TaskDependencyMixin
from core.services.task.lifecycle import TaskLifecycleMixin
from core.services.task.query import TaskQueryMixin
from core.services.task.validation import TaskValidationMixin


class TaskService(
    TaskLifecycleMixin,
    TaskDependencyMixin,
    TaskQueryMixin,
    TaskValidationMixin,
    ServiceBase,
):
    def __init__(
        self,
        session: Optional[Session],
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        rollup_engine: ProgressRollupEngine | None = None,
    ):
        self._session: Optional[Session] = session
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._rollup: ProgressRollupEngine = rollup_engine or ProgressRollupEngine(task_repo)

    @property
    def rollup_engine(self) -> ProgressRollupEngine:
        return self._rollup
