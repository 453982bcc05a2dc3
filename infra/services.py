from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from sqlalchemy.orm import Session

from core.services.gantt import GanttService
from core.services.progress import ProgressRollupEngine
from core.services.task import TaskService
from infra.db.repositories import SqlAlchemyDependencyRepository, SqlAlchemyTaskRepository


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    task_repo: SqlAlchemyTaskRepository
    dependency_repo: SqlAlchemyDependencyRepository
    rollup_engine: ProgressRollupEngine
    task_service: TaskService
    gantt_service: GanttService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "task_repo": self.task_repo,
            "dependency_repo": self.dependency_repo,
            "rollup_engine": self.rollup_engine,
            "task_service": self.task_service,
            "gantt_service": self.gantt_service,
        }


def build_service_graph(
    session: Session,
    today: date | Callable[[], date] | None = None,
) -> ServiceGraph:
    task_repo = SqlAlchemyTaskRepository(session)
    dependency_repo = SqlAlchemyDependencyRepository(session)
    rollup_engine = ProgressRollupEngine(task_repo)
    task_service = TaskService(session, task_repo, dependency_repo, rollup_engine)
    gantt_service = GanttService(task_repo, dependency_repo, today=today)
    return ServiceGraph(
        session=session,
        task_repo=task_repo,
        dependency_repo=dependency_repo,
        rollup_engine=rollup_engine,
        task_service=task_service,
        gantt_service=gantt_service,
    )


def build_services(session: Session) -> dict[str, Any]:
    return build_service_graph(session).as_dict()


__all__ = ["ServiceGraph", "build_service_graph", "build_services"]
