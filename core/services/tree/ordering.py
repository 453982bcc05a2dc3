from __future__ import annotations

from functools import cmp_to_key
from typing import Dict, Iterable, List, NamedTuple

from core.exceptions import ValidationError
from core.models import Task, TaskNode

_ORDER_KEYS = ("deadline", "site")


class SiteSummary(NamedTuple):
    site: str
    count: int
    first_id: int


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _site_key(node: TaskNode) -> str:
    return (node.task.site or "").strip().lower()


def _cmp_site(a: TaskNode, b: TaskNode) -> int:
    sa, sb = _site_key(a), _site_key(b)
    if (sa == "") != (sb == ""):
        return 1 if sa == "" else -1
    return _cmp(sa, sb)


def sort_root_nodes(
    roots: Iterable[TaskNode],
    order_by: str = "deadline",
    direction: str = "asc",
) -> List[TaskNode]:
    """
    Order root nodes by "deadline", "site", "site,deadline" or "deadline,site".

    Only the primary key honours ``direction``; the secondary key is always
    ascending. Roots without a deadline are always last, empty sites sort
    after named ones and the task id breaks remaining ties.
    """
    if direction not in ("asc", "desc"):
        raise ValidationError(f"Unsupported sort direction: {direction!r}", code="SORT_DIRECTION")

    keys: List[str] = []
    for raw in (order_by or "deadline").split(","):
        key = raw.strip()
        if not key:
            continue
        if key not in _ORDER_KEYS:
            raise ValidationError(f"Unsupported sort key: {key!r}", code="SORT_KEY")
        if key not in keys:
            keys.append(key)
    if "deadline" not in keys:
        keys.append("deadline")
    primary = keys[0]
    sign = -1 if direction == "desc" else 1

    def compare(a: TaskNode, b: TaskNode) -> int:
        da, db = a.task.deadline, b.task.deadline
        if (da is None) != (db is None):
            return 1 if da is None else -1

        if primary == "site":
            result = _cmp_site(a, b)
            if result:
                return sign * result
            if da is not None and db is not None and da != db:
                return _cmp(da, db)
        else:
            if da is not None and db is not None and da != db:
                return sign * _cmp(da, db)
            result = _cmp_site(a, b)
            if result:
                return result

        return _cmp(a.id, b.id)

    return sorted(roots, key=cmp_to_key(compare))


def list_sites(tasks: Iterable[Task]) -> List[str]:
    return sorted({t.site.strip() for t in tasks if t.site and t.site.strip()})


def site_summaries(tasks: Iterable[Task]) -> List[SiteSummary]:
    """Distinct sites with task counts, in the order each site first appeared (lowest id)."""
    seen: Dict[str, List[int]] = {}
    for task in tasks:
        site = (task.site or "").strip()
        if not site:
            continue
        entry = seen.setdefault(site, [0, task.id])
        entry[0] += 1
        entry[1] = min(entry[1], task.id)

    rows = [SiteSummary(site, count, first_id) for site, (count, first_id) in seen.items()]
    rows.sort(key=lambda row: row.first_id)
    return rows


__all__ = ["SiteSummary", "sort_root_nodes", "list_sites", "site_summaries"]
