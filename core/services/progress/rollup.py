from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set

from core.interfaces import TaskRepository
from core.models import RollupStopReason, Task, TaskStatus
from core.services.tree.builder import build_task_tree

logger = logging.getLogger(__name__)

# No ancestor chain is climbed further than this many levels in one pass.
MAX_ANCESTOR_DEPTH = 10


def _max_depth_from_env() -> int:
    raw = (os.getenv("SP_ROLLUP_MAX_DEPTH") or "").strip()
    if not raw:
        return MAX_ANCESTOR_DEPTH
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid SP_ROLLUP_MAX_DEPTH=%r", raw)
        return MAX_ANCESTOR_DEPTH
    return value if value > 0 else MAX_ANCESTOR_DEPTH


def rollup_progress(children: Sequence[Task]) -> int:
    """
    Mean of the children's progress rounded half up (75.5 -> 76).
    A parent without children rolls up to 0.
    """
    n = len(children)
    if n == 0:
        return 0
    total = sum(int(c.progress or 0) for c in children)
    return (2 * total + n) // (2 * n)


def rollup_status(current: TaskStatus, children: Sequence[Task]) -> TaskStatus:
    if children and all(c.status == TaskStatus.COMPLETED for c in children):
        return TaskStatus.COMPLETED
    # also covers a parent that lost every child and dropped to 0%
    if current == TaskStatus.COMPLETED:
        return TaskStatus.IN_PROGRESS
    return current


@dataclass
class RollupResult:
    task_id: int
    stop_reason: RollupStopReason
    updated_ids: List[int] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.updated_ids)


class ProgressRollupEngine:
    """
    Propagates progress and status from children to their ancestors.

    The engine only reads and patches tasks through the given store. Each climb
    holds a lock keyed by the root of the chain, so climbs under unrelated roots
    can run on different threads.
    """

    def __init__(
        self,
        store: TaskRepository,
        max_depth: int | None = None,
        stop_when_unchanged: bool = True,
    ):
        self._store: TaskRepository = store
        self._max_depth: int = max_depth if max_depth is not None else _max_depth_from_env()
        self._stop_when_unchanged: bool = stop_when_unchanged
        self._root_locks: Dict[int, RLock] = {}
        self._root_locks_guard = Lock()

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def recompute(self, node_id: int) -> RollupResult:
        """Recompute every strict ancestor of ``node_id``, parent first."""
        with self._root_lock(node_id):
            task = self._store.get(node_id)
            if task is None:
                return RollupResult(node_id, RollupStopReason.MISSING)
            return self._climb(node_id, task.parent_id, visited={node_id})

    def refresh(self, task_id: int) -> RollupResult:
        """Recompute ``task_id`` itself from its children, then its ancestors."""
        with self._root_lock(task_id):
            if self._store.get(task_id) is None:
                return RollupResult(task_id, RollupStopReason.MISSING)
            return self._climb(task_id, task_id, visited=set())

    def rollup_all(self, task_ids: Optional[Iterable[int]] = None) -> List[int]:
        """
        Recompute every parent in the store (or in the subset ``task_ids``),
        children before parents, without the unchanged early exit.
        """
        tasks = self._store.list_all()
        if task_ids is not None:
            wanted = set(task_ids)
            tasks = [t for t in tasks if t.id in wanted]
        tree = build_task_tree(tasks)

        changed: List[int] = []
        for root in tree.roots:
            with self._root_lock(root.id):
                order = []
                stack = [root]
                while stack:
                    node = stack.pop()
                    order.append(node)
                    stack.extend(node.children)
                for node in reversed(order):
                    if node.children and self._apply(node.task):
                        changed.append(node.id)
        return changed

    def _climb(self, origin_id: int, start_id: Optional[int], visited: Set[int]) -> RollupResult:
        result = RollupResult(origin_id, RollupStopReason.ROOT)
        current_id = start_id
        steps = 0
        while current_id is not None:
            if current_id in visited:
                logger.warning(
                    "Rollup from task %s stopped: ancestor %s revisited (cyclic parent chain)",
                    origin_id,
                    current_id,
                )
                result.stop_reason = RollupStopReason.CYCLE
                return result
            if steps >= self._max_depth:
                logger.warning(
                    "Rollup from task %s stopped after %d ancestor levels",
                    origin_id,
                    self._max_depth,
                )
                result.stop_reason = RollupStopReason.MAX_DEPTH
                return result
            visited.add(current_id)
            steps += 1

            ancestor = self._store.get(current_id)
            if ancestor is None:
                result.stop_reason = RollupStopReason.MISSING
                return result

            if self._apply(ancestor):
                result.updated_ids.append(ancestor.id)
            elif self._stop_when_unchanged:
                result.stop_reason = RollupStopReason.UNCHANGED
                return result
            current_id = ancestor.parent_id
        return result

    def _apply(self, task: Task) -> bool:
        children = self._store.children_of(task.id)
        progress = rollup_progress(children)
        status = rollup_status(task.status, children)

        changes = {}
        if progress != task.progress:
            changes["progress"] = progress
        if status != task.status:
            changes["status"] = status
        if not changes:
            return False

        self._store.patch(task.id, changes)
        logger.debug("Rolled up task %s: %s", task.id, changes)
        return True

    def _root_id(self, task_id: int) -> int:
        seen = {task_id}
        current = self._store.get(task_id)
        root_id = task_id
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen or len(seen) > self._max_depth:
                break
            seen.add(current.parent_id)
            parent = self._store.get(current.parent_id)
            if parent is None:
                break
            root_id = parent.id
            current = parent
        return root_id

    @contextmanager
    def _root_lock(self, task_id: int) -> Iterator[int]:
        """
        Hold the lock of the root above ``task_id``.

        The root is resolved again once the lock is held; a re-parent that
        landed in between moves the climb to the new root's lock.
        """
        while True:
            root_id = self._root_id(task_id)
            lock = self._lock_for_root(root_id)
            lock.acquire()
            if self._root_id(task_id) == root_id:
                break
            lock.release()
        try:
            yield root_id
        finally:
            lock.release()

    def _lock_for_root(self, root_id: int) -> RLock:
        with self._root_locks_guard:
            lock = self._root_locks.get(root_id)
            if lock is None:
                lock = RLock()
                self._root_locks[root_id] = lock
            return lock


__all__ = [
    "MAX_ANCESTOR_DEPTH",
    "ProgressRollupEngine",
    "RollupResult",
    "rollup_progress",
    "rollup_status",
]
