# core/services/scheduling/engine.py
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from core.exceptions import BusinessRuleError
from core.models import GanttTask, Task
from core.services.scheduling.date_compute import compute_duration_days
from core.services.scheduling.models import ScheduleRun
from core.services.scheduling.passes import run_backward_pass, run_forward_pass
from core.services.scheduling.results import build_schedule_result

logger = logging.getLogger(__name__)


class CriticalPathScheduler:
    """
    CPM over whole calendar days:
    - Duration: deadline - start_date (min 1), or 1 when a date is missing
    - Forward pass: ES/EF, a task propagates once all predecessors are visited
    - Backward pass: LS/LF from the project finish (max EF)
    - Slack = LS - ES (min 0); critical when slack is 0

    The dependency graph is expected to be acyclic. Tasks a cycle keeps out of
    reach are reported in ``last_run.unscheduled_ids``; in strict mode they
    raise BusinessRuleError(code="SCHEDULE_CYCLE") instead.
    """

    def __init__(
        self,
        today: date | Callable[[], date] | None = None,
        strict: bool = False,
    ):
        self._today = today
        self._strict: bool = strict
        self.last_run: ScheduleRun = ScheduleRun()

    @property
    def strict(self) -> bool:
        return self._strict

    def _resolve_today(self) -> date:
        if self._today is None:
            return date.today()
        if callable(self._today):
            return self._today()
        return self._today

    def schedule(
        self,
        eligible_tasks: Iterable[Task],
        predecessors_of: Dict[int, List[int]],
        successors_of: Dict[int, List[int]],
    ) -> Dict[int, GanttTask]:
        tasks_by_id: Dict[int, Task] = {t.id: t for t in eligible_tasks}
        self.last_run = ScheduleRun()
        if not tasks_by_id:
            return {}

        durations: Dict[int, int] = {
            task_id: compute_duration_days(task.start_date, task.deadline)
            for task_id, task in tasks_by_id.items()
        }

        es, ef, forward_visited = run_forward_pass(
            tasks_by_id=tasks_by_id,
            durations=durations,
            predecessors_of=predecessors_of,
            successors_of=successors_of,
            today=self._resolve_today(),
        )

        finishes = [d for d in ef.values() if d is not None]
        project_finish: Optional[date] = max(finishes) if finishes else None

        ls, lf, backward_visited = run_backward_pass(
            tasks_by_id=tasks_by_id,
            durations=durations,
            predecessors_of=predecessors_of,
            successors_of=successors_of,
            project_finish=project_finish,
        )

        # A cycle can block either pass: ahead of a task or behind it.
        unscheduled = [
            task_id
            for task_id in tasks_by_id
            if task_id not in forward_visited or task_id not in backward_visited
        ]
        if unscheduled:
            if self._strict:
                raise BusinessRuleError(
                    f"Cannot schedule tasks: circular dependency detected around {unscheduled}.",
                    code="SCHEDULE_CYCLE",
                )
            logger.warning(
                "CPM left %d task(s) unscheduled, dependency cycle suspected: %s",
                len(unscheduled),
                unscheduled,
            )

        self.last_run = ScheduleRun(project_finish=project_finish, unscheduled_ids=unscheduled)
        return build_schedule_result(
            tasks_by_id=tasks_by_id,
            durations=durations,
            es=es,
            ef=ef,
            ls=ls,
            lf=lf,
        )


__all__ = ["CriticalPathScheduler"]
