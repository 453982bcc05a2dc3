from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from core.models import GanttRow


@dataclass
class GanttSchedule:
    rows: List[GanttRow]
    project_finish: Optional[date] = None
    dropped_edges: int = 0
    unscheduled_ids: List[int] = field(default_factory=list)

    @property
    def critical_ids(self) -> List[int]:
        return [row.id for row in self.rows if row.is_critical]
