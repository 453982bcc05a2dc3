from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class ScheduleRun:
    """Bookkeeping from the latest scheduler run."""
    project_finish: Optional[date] = None
    unscheduled_ids: List[int] = field(default_factory=list)
