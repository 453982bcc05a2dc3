from __future__ import annotations

import logging
import os
from datetime import date
from typing import Callable, Optional

from core.interfaces import DependencyRepository, TaskRepository
from core.services.gantt.models import GanttSchedule
from core.services.gantt.projection import filter_by_site, project_gantt
from core.services.scheduling import (
    CriticalPathScheduler,
    build_dependency_graph,
    select_eligible_tasks,
)

logger = logging.getLogger(__name__)


class GanttService:
    """Loads a task/dependency snapshot and turns it into Gantt rows with CPM fields."""

    def __init__(
        self,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        today: date | Callable[[], date] | None = None,
        strict: bool | None = None,
    ):
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        if strict is None:
            policy = os.getenv("SP_SCHEDULE_CYCLE_POLICY", "lenient").strip().lower()
            strict = policy == "strict"
        self._scheduler = CriticalPathScheduler(today=today, strict=strict)

    @property
    def strict(self) -> bool:
        return self._scheduler.strict

    def build_gantt_schedule(self, site: Optional[str] = None) -> GanttSchedule:
        tasks = filter_by_site(self._task_repo.list_all(), site)
        eligible = select_eligible_tasks(tasks)
        graph = build_dependency_graph(eligible, self._dependency_repo.list_all())

        computed = self._scheduler.schedule(eligible, graph.predecessors_of, graph.successors_of)
        run = self._scheduler.last_run
        rows = project_gantt(eligible, computed)

        logger.info(
            "Scheduled %d task(s) for site=%s: finish=%s, critical=%d",
            len(rows),
            site or "all",
            run.project_finish,
            sum(1 for r in rows if r.is_critical),
        )
        return GanttSchedule(
            rows=rows,
            project_finish=run.project_finish,
            dropped_edges=graph.dropped_edges,
            unscheduled_ids=list(run.unscheduled_ids),
        )


__all__ = ["GanttService"]
