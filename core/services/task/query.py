from __future__ import annotations

from typing import List, Optional

from core.interfaces import TaskRepository
from core.models import Task, TaskStatus
from core.services.tree import (
    SiteSummary,
    TaskTree,
    build_task_tree,
    list_sites,
    site_summaries,
    sort_root_nodes,
)


class TaskQueryMixin:
    _task_repo: TaskRepository

    def get_task(self, task_id: int) -> Task:
        return self._require_task(task_id)

    def list_tasks(
        self,
        site: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        roots_only: bool = False,
        progress_min: Optional[int] = None,
        progress_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        """
        Filter tasks in id order. Progress bounds are inclusive and ``search``
        matches the title or description, ignoring case.
        """
        tasks = self._task_repo.list_all()
        if site:
            tasks = [t for t in tasks if t.site == site]
        if status:
            tasks = [t for t in tasks if t.status == status]
        if roots_only:
            tasks = [t for t in tasks if t.parent_id is None]
        if progress_min is not None:
            tasks = [t for t in tasks if t.progress >= progress_min]
        if progress_max is not None:
            tasks = [t for t in tasks if t.progress <= progress_max]
        needle = (search or "").strip().lower()
        if needle:
            tasks = [
                t
                for t in tasks
                if needle in t.title.lower() or needle in (t.description or "").lower()
            ]
        return tasks

    def list_children(self, task_id: int) -> List[Task]:
        self._require_task(task_id)
        return self._task_repo.children_of(task_id)

    def get_task_tree(self, order_by: Optional[str] = None, direction: str = "asc") -> TaskTree:
        tree = build_task_tree(self._task_repo.list_all())
        if order_by:
            tree.roots = sort_root_nodes(tree.roots, order_by=order_by, direction=direction)
        return tree

    def list_sites(self) -> List[str]:
        return list_sites(self._task_repo.list_all())

    def list_site_summaries(self) -> List[SiteSummary]:
        return site_summaries(self._task_repo.list_all())
