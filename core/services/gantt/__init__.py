from core.services.gantt.models import GanttSchedule
from core.services.gantt.projection import ALL_SITES, filter_by_site, project_gantt
from core.services.gantt.service import GanttService

__all__ = ["ALL_SITES", "GanttSchedule", "GanttService", "filter_by_site", "project_gantt"]
