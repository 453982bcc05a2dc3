from __future__ import annotations

from collections import deque
from datetime import date
from typing import Dict, List, Optional, Set

from core.exceptions import BusinessRuleError
from core.models import Task
from core.services.scheduling.date_compute import add_days


def _iteration_limit(task_count: int, adjacency: Dict[int, List[int]]) -> int:
    return task_count + sum(len(v) for v in adjacency.values()) + 1


def run_forward_pass(
    tasks_by_id: Dict[int, Task],
    durations: Dict[int, int],
    predecessors_of: Dict[int, List[int]],
    successors_of: Dict[int, List[int]],
    today: date,
) -> tuple[Dict[int, Optional[date]], Dict[int, Optional[date]], Set[int]]:
    es: Dict[int, Optional[date]] = {task_id: None for task_id in tasks_by_id}
    ef: Dict[int, Optional[date]] = {task_id: None for task_id in tasks_by_id}
    queue: deque[int] = deque()

    for task_id, task in tasks_by_id.items():
        if predecessors_of.get(task_id):
            continue
        es[task_id] = task.start_date or today
        ef[task_id] = add_days(es[task_id], durations[task_id])
        queue.append(task_id)

    visited: Set[int] = set()
    limit = _iteration_limit(len(tasks_by_id), successors_of)
    iterations = 0
    while queue:
        iterations += 1
        if iterations > limit:
            raise BusinessRuleError(
                "Cannot schedule tasks: forward pass exceeded its iteration limit.",
                code="SCHEDULE_ITERATION_LIMIT",
            )
        task_id = queue.popleft()
        if task_id in visited:
            continue
        visited.add(task_id)

        for succ_id in successors_of.get(task_id, []):
            candidate = ef[task_id]
            if es[succ_id] is None or candidate > es[succ_id]:
                es[succ_id] = candidate
                ef[succ_id] = add_days(candidate, durations[succ_id])
            # propagate only after the last predecessor has cleared
            if succ_id not in visited and all(
                p in visited for p in predecessors_of.get(succ_id, [])
            ):
                queue.append(succ_id)

    return es, ef, visited


def run_backward_pass(
    tasks_by_id: Dict[int, Task],
    durations: Dict[int, int],
    predecessors_of: Dict[int, List[int]],
    successors_of: Dict[int, List[int]],
    project_finish: Optional[date],
) -> tuple[Dict[int, Optional[date]], Dict[int, Optional[date]], Set[int]]:
    ls: Dict[int, Optional[date]] = {task_id: None for task_id in tasks_by_id}
    lf: Dict[int, Optional[date]] = {task_id: None for task_id in tasks_by_id}
    visited: Set[int] = set()
    if project_finish is None:
        return ls, lf, visited

    queue: deque[int] = deque()
    for task_id in tasks_by_id:
        if successors_of.get(task_id):
            continue
        lf[task_id] = project_finish
        ls[task_id] = add_days(project_finish, -durations[task_id])
        queue.append(task_id)

    limit = _iteration_limit(len(tasks_by_id), predecessors_of)
    iterations = 0
    while queue:
        iterations += 1
        if iterations > limit:
            raise BusinessRuleError(
                "Cannot schedule tasks: backward pass exceeded its iteration limit.",
                code="SCHEDULE_ITERATION_LIMIT",
            )
        task_id = queue.popleft()
        if task_id in visited:
            continue
        visited.add(task_id)

        for pred_id in predecessors_of.get(task_id, []):
            candidate = ls[task_id]
            if lf[pred_id] is None or candidate < lf[pred_id]:
                lf[pred_id] = candidate
                ls[pred_id] = add_days(candidate, -durations[pred_id])
            if pred_id not in visited and all(
                s in visited for s in successors_of.get(pred_id, [])
            ):
                queue.append(pred_id)

    return ls, lf, visited


__all__ = ["run_forward_pass", "run_backward_pass"]
