"""Reporting API wrappers around renderer classes."""

from datetime import date
from pathlib import Path
from typing import Optional

from core.reporting.renderers.excel import GanttExcelRenderer
from core.reporting.renderers.gantt import GanttPngRenderer
from core.services.gantt import GanttService


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def generate_gantt_png(
    gantt_service: GanttService,
    output_path: str | Path,
    site: Optional[str] = None,
    today: Optional[date] = None,
) -> Path:
    schedule = gantt_service.build_gantt_schedule(site=site)
    title = f"Site Schedule - {site}" if site else "Site Schedule"
    renderer = GanttPngRenderer(today=today)
    return renderer.render(schedule.rows, _ensure_parent(Path(output_path)), title=title)


def generate_gantt_excel(
    gantt_service: GanttService,
    output_path: str | Path,
    site: Optional[str] = None,
) -> Path:
    schedule = gantt_service.build_gantt_schedule(site=site)
    renderer = GanttExcelRenderer()
    return renderer.render(schedule.rows, _ensure_parent(Path(output_path)), project_finish=schedule.project_finish)
