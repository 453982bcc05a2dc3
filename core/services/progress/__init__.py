from core.services.progress.rollup import (
    MAX_ANCESTOR_DEPTH,
    ProgressRollupEngine,
    RollupResult,
    rollup_progress,
    rollup_status,
)
from core.services.progress.store import InMemoryDependencyStore, InMemoryTaskStore

__all__ = [
    "MAX_ANCESTOR_DEPTH",
    "ProgressRollupEngine",
    "RollupResult",
    "rollup_progress",
    "rollup_status",
    "InMemoryTaskStore",
    "InMemoryDependencyStore",
]
