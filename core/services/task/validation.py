from __future__ import annotations

from collections import deque
from datetime import date
from typing import Optional

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskStatus
from core.services.progress.rollup import MAX_ANCESTOR_DEPTH

# Trees are at most four levels deep: root, child, grandchild, great-grandchild.
MAX_TASK_DEPTH = 4
# Direct sub-tasks allowed under one parent.
MAX_CHILDREN = 4


class TaskValidationMixin:
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository

    def _validate_title(self, title: str) -> str:
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Task title cannot be empty.", code="TASK_TITLE_EMPTY")
        return cleaned

    def _validate_progress(self, progress: int) -> int:
        if isinstance(progress, bool) or not isinstance(progress, int):
            raise ValidationError("progress must be a whole number.", code="TASK_PROGRESS_INVALID")
        if progress < 0 or progress > 100:
            raise ValidationError("progress must be between 0 and 100.", code="TASK_PROGRESS_RANGE")
        return progress

    def _validate_dates(self, start_date: Optional[date], deadline: Optional[date]) -> None:
        if start_date and deadline and deadline < start_date:
            raise ValidationError(
                "Task deadline cannot be before start_date.",
                code="TASK_INVALID_DATE",
            )

    @staticmethod
    def _normalize_site(site: Optional[str]) -> Optional[str]:
        cleaned = (site or "").strip()
        return cleaned or None

    def _validate_root_site(self, parent_id: Optional[int], site: Optional[str]) -> None:
        if parent_id is None and not site:
            raise ValidationError("A top-level task needs a site.", code="TASK_SITE_REQUIRED")

    def _reconcile_progress_status(
        self,
        progress: int,
        status: TaskStatus,
        new_progress: Optional[int] = None,
        new_status: Optional[TaskStatus] = None,
    ) -> tuple[int, TaskStatus]:
        """
        Make a task's own progress and status agree.

        When only progress is given the status follows it, when only status is
        given the progress follows it, and a contradictory pair is rejected.
        COMPLETED always means 100 and NOT_STARTED always means 0.
        """
        if new_progress is not None and new_status is not None:
            mismatched = (new_status == TaskStatus.COMPLETED) != (new_progress == 100) or (
                new_status == TaskStatus.NOT_STARTED and new_progress != 0
            )
            if mismatched:
                raise ValidationError(
                    f"status {new_status.value} does not match progress {new_progress}.",
                    code="TASK_STATUS_MISMATCH",
                )
            return new_progress, new_status

        if new_progress is not None:
            if new_progress == 0:
                return 0, TaskStatus.NOT_STARTED
            if new_progress == 100:
                return 100, TaskStatus.COMPLETED
            if status in (TaskStatus.NOT_STARTED, TaskStatus.COMPLETED):
                return new_progress, TaskStatus.IN_PROGRESS
            return new_progress, status

        if new_status is not None:
            if new_status == TaskStatus.COMPLETED:
                return 100, new_status
            if new_status == TaskStatus.NOT_STARTED:
                return 0, new_status
            if progress == 100:
                raise ValidationError(
                    "A task at 100% progress cannot be reopened without a new progress value.",
                    code="TASK_STATUS_MISMATCH",
                )
            return progress, new_status

        return progress, status

    def _require_task(self, task_id: int) -> Task:
        task = self._task_repo.get(task_id)
        if task is None:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        return task

    def _depth_of(self, task: Task) -> int:
        depth = 1
        seen = {task.id}
        current = task
        while current.parent_id is not None and depth <= MAX_ANCESTOR_DEPTH:
            if current.parent_id in seen:
                break
            parent = self._task_repo.get(current.parent_id)
            if parent is None:
                break
            seen.add(parent.id)
            depth += 1
            current = parent
        return depth

    def _subtree_height(self, task_id: int) -> int:
        height = 0
        frontier = [task_id]
        seen: set[int] = set()
        while frontier and height <= MAX_ANCESTOR_DEPTH:
            height += 1
            next_frontier: list[int] = []
            for current in frontier:
                seen.add(current)
                next_frontier.extend(
                    c.id for c in self._task_repo.children_of(current) if c.id not in seen
                )
            frontier = next_frontier
        return height

    def _validate_parent(self, parent_id: Optional[int], task_id: Optional[int] = None) -> None:
        if parent_id is None:
            return
        parent = self._task_repo.get(parent_id)
        if parent is None:
            raise NotFoundError("Parent task not found.", code="TASK_PARENT_NOT_FOUND")

        if task_id is not None:
            if parent_id == task_id or parent_id in self._descendant_ids(task_id):
                raise BusinessRuleError(
                    "A task cannot be moved under itself or one of its sub-tasks.",
                    code="TASK_PARENT_CYCLE",
                )
            height = self._subtree_height(task_id)
        else:
            height = 1

        if self._depth_of(parent) + height > MAX_TASK_DEPTH:
            raise ValidationError(
                f"Tasks can only be nested {MAX_TASK_DEPTH} levels deep.",
                code="TASK_DEPTH_LIMIT",
            )

        siblings = [c for c in self._task_repo.children_of(parent_id) if c.id != task_id]
        if len(siblings) >= MAX_CHILDREN:
            raise ValidationError(
                f"A task can have at most {MAX_CHILDREN} direct sub-tasks.",
                code="TASK_CHILDREN_LIMIT",
            )

    def _descendant_ids(self, task_id: int) -> list[int]:
        found: list[int] = []
        seen = {task_id}
        queue = deque([task_id])
        while queue:
            current = queue.popleft()
            for child in self._task_repo.children_of(current):
                if child.id in seen:
                    continue
                seen.add(child.id)
                found.append(child.id)
                queue.append(child.id)
        return found

    def _check_no_circular_dependency(self, predecessor_id: int, successor_id: int) -> None:
        graph: dict[int, list[int]] = {}
        for dep in self._dependency_repo.list_all():
            graph.setdefault(dep.predecessor_id, []).append(dep.successor_id)

        path = self._find_path(graph, successor_id, predecessor_id)
        if path:
            cycle_text = " -> ".join(str(task_id) for task_id in [predecessor_id, *path])
            raise BusinessRuleError(
                f"Adding this dependency would create a circular dependency ({cycle_text}).",
                code="DEPENDENCY_CYCLE",
            )

    @staticmethod
    def _find_path(graph: dict[int, list[int]], start: int, target: int) -> list[int] | None:
        queue = deque([(start, [start])])
        visited: set[int] = set()
        while queue:
            node, path = queue.popleft()
            if node == target:
                return path
            if node in visited:
                continue
            visited.add(node)
            for nxt in graph.get(node, []):
                if nxt not in visited:
                    queue.append((nxt, [*path, nxt]))
        return None
