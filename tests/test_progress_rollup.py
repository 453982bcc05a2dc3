import threading

from core.models import RollupStopReason, Task, TaskStatus
from core.services.progress import (
    InMemoryTaskStore,
    ProgressRollupEngine,
    rollup_progress,
)


def _task(task_id, parent_id=None, progress=0, status=TaskStatus.NOT_STARTED):
    return Task(id=task_id, title=f"Task {task_id}", parent_id=parent_id, progress=progress, status=status)


def test_parent_progress_is_rounded_mean_of_children():
    store = InMemoryTaskStore(
        [
            _task(1),
            _task(2, 1, progress=100, status=TaskStatus.COMPLETED),
            _task(3, 1, progress=50, status=TaskStatus.IN_PROGRESS),
        ]
    )
    engine = ProgressRollupEngine(store)

    result = engine.recompute(2)

    assert store.get(1).progress == 75
    assert result.updated_ids == [1]
    assert result.stop_reason == RollupStopReason.ROOT


def test_completed_parent_is_demoted_when_a_child_reverts():
    store = InMemoryTaskStore(
        [
            _task(1, progress=100, status=TaskStatus.COMPLETED),
            _task(2, 1, progress=100, status=TaskStatus.COMPLETED),
            _task(3, 1, progress=0, status=TaskStatus.NOT_STARTED),
        ]
    )
    engine = ProgressRollupEngine(store)

    engine.recompute(3)

    parent = store.get(1)
    assert parent.progress == 50
    assert parent.status == TaskStatus.IN_PROGRESS


def test_parent_completes_only_when_every_child_is_completed():
    store = InMemoryTaskStore(
        [
            _task(1, status=TaskStatus.IN_PROGRESS),
            _task(2, 1, progress=100, status=TaskStatus.COMPLETED),
            _task(3, 1, progress=100, status=TaskStatus.IN_PROGRESS),
        ]
    )
    engine = ProgressRollupEngine(store)

    engine.recompute(2)
    assert store.get(1).progress == 100
    assert store.get(1).status == TaskStatus.IN_PROGRESS

    store.patch(3, {"status": TaskStatus.COMPLETED})
    engine.recompute(3)
    assert store.get(1).status == TaskStatus.COMPLETED


def test_rollup_never_demotes_to_not_started():
    store = InMemoryTaskStore(
        [_task(1, status=TaskStatus.IN_PROGRESS), _task(2, 1, progress=0)]
    )
    ProgressRollupEngine(store).recompute(2)

    assert store.get(1).progress == 0
    assert store.get(1).status == TaskStatus.IN_PROGRESS


def test_rollup_climbs_to_the_root():
    store = InMemoryTaskStore(
        [
            _task(1),
            _task(2, 1),
            _task(3, 2),
            _task(4, 3, progress=80, status=TaskStatus.IN_PROGRESS),
        ]
    )
    result = ProgressRollupEngine(store).recompute(4)

    assert [store.get(i).progress for i in (3, 2, 1)] == [80, 80, 80]
    assert result.updated_ids == [3, 2, 1]


def test_climb_stops_when_an_ancestor_is_unchanged():
    store = InMemoryTaskStore(
        [
            _task(1, progress=7),  # deliberately stale
            _task(2, 1, progress=40),
            _task(3, 2, progress=40),
        ]
    )
    result = ProgressRollupEngine(store).recompute(3)

    assert result.stop_reason == RollupStopReason.UNCHANGED
    assert result.updated_ids == []
    assert store.get(1).progress == 7


def test_climb_without_early_exit_reaches_stale_ancestors():
    store = InMemoryTaskStore(
        [_task(1, progress=7), _task(2, 1, progress=40), _task(3, 2, progress=40)]
    )
    result = ProgressRollupEngine(store, stop_when_unchanged=False).recompute(3)

    assert result.updated_ids == [1]
    assert store.get(1).progress == 40


def test_recompute_is_idempotent():
    store = InMemoryTaskStore(
        [
            _task(1, progress=100, status=TaskStatus.COMPLETED),
            _task(2, 1, progress=33),
            _task(3, 1, progress=66),
            _task(4, 1, progress=100, status=TaskStatus.COMPLETED),
        ]
    )
    engine = ProgressRollupEngine(store)

    first = engine.recompute(2)
    snapshot = (store.get(1).progress, store.get(1).status)
    second = engine.recompute(2)

    assert first.changed
    assert not second.changed
    assert (store.get(1).progress, store.get(1).status) == snapshot == (66, TaskStatus.IN_PROGRESS)


def test_rounding_is_half_up():
    children = [_task(1, progress=50), _task(2, progress=51)]
    assert rollup_progress(children) == 51  # 50.5
    assert rollup_progress([_task(1, progress=33)] * 3) == 33
    assert rollup_progress([_task(1, progress=1), _task(2, progress=0)]) == 1  # 0.5
    assert rollup_progress([]) == 0


def test_refresh_resets_childless_parent_to_zero():
    store = InMemoryTaskStore([_task(1, progress=60, status=TaskStatus.IN_PROGRESS), _task(2)])

    result = ProgressRollupEngine(store).refresh(1)

    assert store.get(1).progress == 0
    assert store.get(1).status == TaskStatus.IN_PROGRESS
    assert result.updated_ids == [1]


def test_cyclic_parent_chain_stops_without_error():
    store = InMemoryTaskStore(
        [_task(1, parent_id=2), _task(2, parent_id=1), _task(3, parent_id=1, progress=30)]
    )
    result = ProgressRollupEngine(store).recompute(3)

    assert result.stop_reason == RollupStopReason.CYCLE
    assert set(result.updated_ids) <= {1, 2}


def test_long_chain_is_capped_at_max_depth():
    tasks = [_task(1)]
    for task_id in range(2, 16):
        tasks.append(_task(task_id, parent_id=task_id - 1))
    tasks[-1].progress = 90
    store = InMemoryTaskStore(tasks)

    result = ProgressRollupEngine(store, max_depth=10).recompute(15)

    assert result.stop_reason == RollupStopReason.MAX_DEPTH
    assert len(result.updated_ids) == 10
    assert store.get(5).progress == 90
    assert store.get(4).progress == 0


def test_max_depth_can_come_from_environment(monkeypatch):
    monkeypatch.setenv("SP_ROLLUP_MAX_DEPTH", "3")
    assert ProgressRollupEngine(InMemoryTaskStore()).max_depth == 3

    monkeypatch.setenv("SP_ROLLUP_MAX_DEPTH", "nope")
    assert ProgressRollupEngine(InMemoryTaskStore()).max_depth == 10


def test_missing_task_is_reported_not_raised():
    result = ProgressRollupEngine(InMemoryTaskStore()).recompute(42)
    assert result.stop_reason == RollupStopReason.MISSING


def test_rollup_all_satisfies_mean_and_completion_for_every_parent():
    store = InMemoryTaskStore(
        [
            _task(1, progress=3),
            _task(2, 1, progress=11),
            _task(3, 1, progress=100, status=TaskStatus.COMPLETED),
            _task(4, 2, progress=20, status=TaskStatus.IN_PROGRESS),
            _task(5, 2, progress=45, status=TaskStatus.IN_PROGRESS),
            _task(6, progress=100, status=TaskStatus.COMPLETED),
            _task(7, 6, progress=100, status=TaskStatus.COMPLETED),
            _task(8, 6, progress=100, status=TaskStatus.COMPLETED),
        ]
    )
    engine = ProgressRollupEngine(store)

    engine.rollup_all()

    for task in store.list_all():
        children = store.children_of(task.id)
        if not children:
            continue
        assert task.progress == rollup_progress(children)
        all_done = all(c.status == TaskStatus.COMPLETED for c in children)
        assert (task.status == TaskStatus.COMPLETED) == all_done

    assert store.get(2).progress == 33  # (20 + 45) / 2 = 32.5
    assert store.get(1).progress == 67  # (33 + 100) / 2 = 66.5
    assert engine.rollup_all() == []


def test_independent_roots_roll_up_in_parallel_threads():
    tasks = []
    for root in range(0, 40, 4):
        tasks.append(_task(root + 1))
        tasks.append(_task(root + 2, root + 1))
        tasks.append(_task(root + 3, root + 2, progress=60, status=TaskStatus.IN_PROGRESS))
    store = InMemoryTaskStore(tasks)
    engine = ProgressRollupEngine(store)

    threads = [
        threading.Thread(target=engine.recompute, args=(t.id,))
        for t in tasks
        if t.progress == 60
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    roots = [t for t in store.list_all() if t.parent_id is None]
    assert all(r.progress == 60 for r in roots)


def test_climb_follows_a_move_that_lands_before_the_lock_is_taken(monkeypatch):
    store = InMemoryTaskStore(
        [_task(1), _task(2), _task(3, 1, progress=40, status=TaskStatus.IN_PROGRESS)]
    )
    engine = ProgressRollupEngine(store)
    lock_for_root = engine._lock_for_root
    requested: list[int] = []

    def _move_then_lock(root_id):
        requested.append(root_id)
        if len(requested) == 1:
            store.patch(3, {"parent_id": 2})
        return lock_for_root(root_id)

    monkeypatch.setattr(engine, "_lock_for_root", _move_then_lock)
    result = engine.recompute(3)

    assert requested == [1, 2]
    assert result.updated_ids == [2]
    assert store.get(2).progress == 40
    assert store.get(1).progress == 0


def test_refresh_demotes_completed_parent_that_lost_its_children():
    store = InMemoryTaskStore([_task(1, progress=100, status=TaskStatus.COMPLETED)])

    ProgressRollupEngine(store).refresh(1)

    assert store.get(1).progress == 0
    assert store.get(1).status == TaskStatus.IN_PROGRESS
