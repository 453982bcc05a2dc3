from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from core.models import Task, TaskNode

logger = logging.getLogger(__name__)


@dataclass
class TaskTree:
    roots: List[TaskNode]
    nodes_by_id: Dict[int, TaskNode]
    orphan_ids: List[int] = field(default_factory=list)

    @property
    def orphan_count(self) -> int:
        return len(self.orphan_ids)

    def depth_of(self, task_id: int) -> int | None:
        node = self.nodes_by_id.get(task_id)
        return node.depth if node else None

    def iter_nodes(self):
        for root in self.roots:
            yield from root.walk()


def build_task_tree(tasks: Iterable[Task]) -> TaskTree:
    """
    Nest a flat task list under each task's parent_id.

    A task whose parent is not part of the input is promoted to a root and
    recorded in ``orphan_ids``. Depth is 1 for roots and parent depth + 1 below.
    """
    nodes_by_id: Dict[int, TaskNode] = {}
    for task in tasks:
        nodes_by_id[task.id] = TaskNode(task=task)

    roots: List[TaskNode] = []
    orphan_ids: List[int] = []
    for node in nodes_by_id.values():
        parent_id = node.task.parent_id
        if parent_id is None:
            roots.append(node)
            continue
        parent = nodes_by_id.get(parent_id)
        if parent is None:
            orphan_ids.append(node.id)
            roots.append(node)
        else:
            parent.children.append(node)

    # parents may come after their children in the input, so depth is set
    # from the roots down once linking is done
    stack = [(root, 1) for root in roots]
    while stack:
        node, depth = stack.pop()
        node.depth = depth
        stack.extend((child, depth + 1) for child in node.children)

    if orphan_ids:
        logger.info("Promoted %d orphaned task(s) to root: %s", len(orphan_ids), orphan_ids)

    return TaskTree(roots=roots, nodes_by_id=nodes_by_id, orphan_ids=orphan_ids)


__all__ = ["TaskTree", "build_task_tree"]
