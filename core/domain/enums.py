from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class RollupStopReason(str, Enum):
    ROOT = "root"
    UNCHANGED = "unchanged"
    CYCLE = "cycle"
    MAX_DEPTH = "max_depth"
    MISSING = "missing"


__all__ = ["TaskStatus", "RollupStopReason"]
