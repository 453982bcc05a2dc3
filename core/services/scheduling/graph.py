from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from core.models import Task, TaskDependency

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    task_ids: List[int]
    predecessors_of: Dict[int, List[int]] = field(default_factory=dict)
    successors_of: Dict[int, List[int]] = field(default_factory=dict)
    dropped_edges: int = 0
    duplicate_edges: int = 0

    @property
    def edge_count(self) -> int:
        return sum(len(v) for v in self.successors_of.values())


def select_eligible_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Root tasks carrying a site; sub-tasks only take part in progress rollup."""
    return [t for t in tasks if t.is_schedulable]


def build_dependency_graph(
    eligible_tasks: Iterable[Task],
    deps: Iterable[TaskDependency],
) -> DependencyGraph:
    task_ids = [t.id for t in eligible_tasks]
    eligible = set(task_ids)
    graph = DependencyGraph(task_ids=task_ids)
    seen: set[tuple[int, int]] = set()

    for dep in deps:
        pred_id, succ_id = dep.predecessor_id, dep.successor_id
        if pred_id not in eligible or succ_id not in eligible:
            graph.dropped_edges += 1
            continue
        if (pred_id, succ_id) in seen:
            graph.duplicate_edges += 1
            continue
        seen.add((pred_id, succ_id))
        graph.predecessors_of.setdefault(succ_id, []).append(pred_id)
        graph.successors_of.setdefault(pred_id, []).append(succ_id)

    if graph.dropped_edges:
        logger.info(
            "Dependency graph: dropped %d edge(s) touching tasks outside the schedulable set",
            graph.dropped_edges,
        )
    return graph


__all__ = ["DependencyGraph", "select_eligible_tasks", "build_dependency_graph"]
