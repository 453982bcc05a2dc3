from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from core.events.domain_events import domain_events
from core.exceptions import ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskStatus
from core.services.progress.rollup import ProgressRollupEngine, RollupResult


logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {"title", "parent_id", "site", "status", "progress", "start_date", "deadline", "description"}
)
_ROLLUP_FIELDS = frozenset({"progress", "status", "parent_id"})


class TaskLifecycleMixin:
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository
    _rollup: ProgressRollupEngine

    def create_task(
        self,
        title: str,
        parent_id: Optional[int] = None,
        site: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        progress: Optional[int] = None,
        start_date: Optional[date] = None,
        deadline: Optional[date] = None,
        description: str = "",
    ) -> Task:
        """
        Create a task. Passing only ``status`` or only ``progress`` derives the
        other one; a new task defaults to not started at 0%.
        """
        title = self._validate_title(title)
        if progress is not None:
            self._validate_progress(progress)
        progress, status = self._reconcile_progress_status(
            0,
            TaskStatus.NOT_STARTED,
            progress,
            TaskStatus(status) if status is not None else None,
        )
        self._validate_dates(start_date, deadline)
        self._validate_parent(parent_id)
        site = self._normalize_site(site)
        self._validate_root_site(parent_id, site)

        task = Task(
            id=None,
            title=title,
            parent_id=parent_id,
            site=site,
            status=status,
            progress=progress,
            start_date=start_date,
            deadline=deadline,
            description=(description or "").strip(),
        )

        try:
            task = self._task_repo.add(task)
            rollup = self._rollup.recompute(task.id)
            self._commit()
        except Exception as exc:
            self._rollback()
            logger.error(f"Error creating task: {exc}")
            raise

        logger.info(f"Created task {task.id} - {task.title} (parent={parent_id})")
        self._emit_changes(task.id, rollup)
        return self._task_repo.get(task.id) or task

    def update_task(self, task_id: int, **changes: Any) -> Task:
        """
        Apply the given field changes; only keys that are passed are touched,
        so ``parent_id=None`` promotes the task to a root.
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown task fields: {sorted(unknown)}", code="TASK_FIELD_UNKNOWN")

        task = self._require_task(task_id)
        if "title" in changes:
            changes["title"] = self._validate_title(changes["title"])
        if "progress" in changes:
            self._validate_progress(changes["progress"])
        if "progress" in changes or "status" in changes:
            changes["progress"], changes["status"] = self._reconcile_progress_status(
                task.progress,
                task.status,
                changes.get("progress"),
                TaskStatus(changes["status"]) if "status" in changes else None,
            )
        if "site" in changes:
            changes["site"] = self._normalize_site(changes["site"])
        if "description" in changes:
            changes["description"] = (changes["description"] or "").strip()
        self._validate_dates(
            changes.get("start_date", task.start_date),
            changes.get("deadline", task.deadline),
        )

        old_parent_id = task.parent_id
        parent_changed = "parent_id" in changes and changes["parent_id"] != old_parent_id
        if parent_changed:
            self._validate_parent(changes["parent_id"], task_id=task_id)
        if "parent_id" in changes or "site" in changes:
            self._validate_root_site(
                changes.get("parent_id", old_parent_id),
                changes.get("site", task.site),
            )

        changes = {k: v for k, v in changes.items() if getattr(task, k) != v}
        if not changes:
            return task

        try:
            updated = self._task_repo.patch(task_id, changes)
            rollup = None
            if _ROLLUP_FIELDS & set(changes):
                rollup = self._rollup_from(task_id)
                if parent_changed and old_parent_id is not None:
                    rollup = _merge_rollups(rollup, self._rollup.refresh(old_parent_id))
            self._commit()
        except Exception:
            self._rollback()
            raise

        logger.info(f"Updated task {task_id}: {sorted(changes)}")
        self._emit_changes(task_id, rollup)
        return self._task_repo.get(task_id) or updated

    def update_progress(self, task_id: int, progress: int) -> Task:
        """Set progress and derive the task's own status from it."""
        self._validate_progress(progress)
        return self.update_task(task_id, progress=progress)

    def set_status(self, task_id: int, status: TaskStatus) -> Task:
        """Set status; COMPLETED moves progress to 100 and NOT_STARTED to 0."""
        return self.update_task(task_id, status=TaskStatus(status))

    def delete_task(self, task_id: int) -> None:
        """Delete a task with its whole subtree and every edge touching it."""
        task = self._require_task(task_id)
        doomed = [task_id, *self._descendant_ids(task_id)]

        try:
            for doomed_id in reversed(doomed):
                self._dependency_repo.delete_for_task(doomed_id)
                self._task_repo.delete(doomed_id)
            rollup = self._rollup.refresh(task.parent_id) if task.parent_id is not None else None
            self._commit()
        except Exception:
            self._rollback()
            raise

        logger.info(f"Deleted task {task_id} and {len(doomed) - 1} sub-task(s)")
        self._emit_changes(task_id, rollup)

    def recompute_progress(self, task_id: int) -> RollupResult:
        self._require_task(task_id)
        try:
            rollup = self._rollup.recompute(task_id)
            self._commit()
        except Exception:
            self._rollback()
            raise
        self._emit_changes(task_id, rollup)
        return rollup

    def _emit_changes(self, task_id: int, rollup: Optional[RollupResult]) -> None:
        domain_events.tasks_changed.emit(task_id)
        if rollup is not None and rollup.changed:
            domain_events.progress_rolled_up.emit(list(rollup.updated_ids))

    def _rollup_from(self, task_id: int) -> RollupResult:
        # A parent's own values always come from its children.
        if self._task_repo.children_of(task_id):
            result = self._rollup.refresh(task_id)
            if result.changed:
                return result
        return self._rollup.recompute(task_id)


def _merge_rollups(first: RollupResult, second: RollupResult) -> RollupResult:
    updated = list(first.updated_ids)
    updated.extend(i for i in second.updated_ids if i not in updated)
    return RollupResult(first.task_id, first.stop_reason, updated)
