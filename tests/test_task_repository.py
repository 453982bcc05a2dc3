from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import Task, TaskDependency, TaskStatus


def test_task_repository_round_trips_fields(services):
    repo = services["task_repo"]

    saved = repo.add(
        Task(
            id=None,
            title="Formwork",
            site="North",
            status=TaskStatus.IN_PROGRESS,
            progress=35,
            start_date=date(2025, 6, 2),
            deadline=date(2025, 6, 9),
            description="east wing",
        )
    )

    loaded = repo.get(saved.id)
    assert loaded == saved
    assert loaded.status == TaskStatus.IN_PROGRESS
    assert loaded.deadline == date(2025, 6, 9)
    assert repo.get(saved.id + 100) is None


def test_task_repository_patch_and_children(services):
    repo = services["task_repo"]

    parent = repo.add(Task(id=None, title="Parent"))
    first = repo.add(Task(id=None, title="First", parent_id=parent.id))
    second = repo.add(Task(id=None, title="Second", parent_id=parent.id))

    patched = repo.patch(second.id, {"progress": 40, "status": TaskStatus.IN_PROGRESS})
    assert patched.progress == 40

    assert [c.id for c in repo.children_of(parent.id)] == [first.id, second.id]
    assert repo.parent_of(first.id).id == parent.id
    assert repo.parent_of(parent.id) is None

    with pytest.raises(ValidationError):
        repo.patch(first.id, {"owner": "x"})
    with pytest.raises(NotFoundError):
        repo.patch(999, {"progress": 1})


def test_dependency_repository_lists_by_either_endpoint(services):
    tasks = services["task_repo"]
    deps = services["dependency_repo"]

    a = tasks.add(Task(id=None, title="A", site="North"))
    b = tasks.add(Task(id=None, title="B", site="North"))
    c = tasks.add(Task(id=None, title="C", site="North"))
    ab = deps.add(TaskDependency.create(a.id, b.id))
    bc = deps.add(TaskDependency.create(b.id, c.id))

    assert {d.id for d in deps.list_by_task(b.id)} == {ab.id, bc.id}
    assert [d.id for d in deps.list_by_task(a.id)] == [ab.id]

    deps.delete_for_task(b.id)
    assert deps.list_all() == []


def test_task_tree_query_orders_roots(services):
    ts = services["task_service"]

    late = ts.create_task("Late", site="North", deadline=date(2025, 9, 1))
    early = ts.create_task("Early", site="South", deadline=date(2025, 7, 1))
    child = ts.create_task("Child", parent_id=late.id)

    tree = ts.get_task_tree(order_by="deadline")

    assert [n.id for n in tree.roots] == [early.id, late.id]
    assert tree.depth_of(child.id) == 2

    by_site_desc = ts.get_task_tree(order_by="site", direction="desc")
    assert [n.id for n in by_site_desc.roots] == [early.id, late.id]


def test_list_tasks_filters(services):
    ts = services["task_service"]

    root = ts.create_task("Root", site="North")
    child = ts.create_task("Child", parent_id=root.id, site="North")
    other = ts.create_task("Other", site="South")
    ts.update_progress(other.id, 10)

    assert [t.id for t in ts.list_tasks(site="North")] == [root.id, child.id]
    assert [t.id for t in ts.list_tasks(site="North", roots_only=True)] == [root.id]
    assert [t.id for t in ts.list_tasks(status=TaskStatus.IN_PROGRESS)] == [other.id]
    summaries = ts.list_site_summaries()
    assert [(s.site, s.count) for s in summaries] == [("North", 2), ("South", 1)]

    slab = ts.create_task("Pour slab", site="South", progress=50, description="East wing footing")
    roof = ts.create_task("Roof", site="South", progress=90)

    assert [t.id for t in ts.list_tasks(progress_min=10, progress_max=60)] == [other.id, slab.id]
    assert [t.id for t in ts.list_tasks(progress_min=60)] == [roof.id]
    assert [t.id for t in ts.list_tasks(progress_max=0)] == [root.id, child.id]
    assert [t.id for t in ts.list_tasks(search="SLAB")] == [slab.id]
    assert [t.id for t in ts.list_tasks(search="wing")] == [slab.id]
    assert [t.id for t in ts.list_tasks(search="  ")] == [root.id, child.id, other.id, slab.id, roof.id]
    matching = ts.list_tasks(search="o", roots_only=True, progress_min=1)
    assert [t.id for t in matching] == [other.id, slab.id, roof.id]
