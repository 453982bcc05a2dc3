from datetime import date
from pathlib import Path
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side

from core.models import GanttRow

HEADERS = [
    "Task ID", "Title", "Site", "Status", "% complete", "Start", "Deadline",
    "Duration (days)", "Earliest start", "Earliest finish", "Latest start",
    "Latest finish", "Slack (days)", "Critical",
]


def _iso(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


class GanttExcelRenderer:
    def render(self, rows: List[GanttRow], output_path: Path, project_finish: Optional[date] = None) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()

        header_font = Font(bold=True)
        center = Alignment(horizontal="center")
        thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        header_fill = PatternFill("solid", fgColor="DDDDDD")
        critical_fill = PatternFill("solid", fgColor="FFCCCC")

        ws = wb.active
        ws.title = "Schedule"
        for col_index, h in enumerate(HEADERS, start=1):
            cell = ws.cell(row=1, column=col_index, value=h)
            cell.font = header_font
            cell.alignment = center
            cell.fill = header_fill
            cell.border = thin_border

        for row_index, r in enumerate(rows, start=2):
            values = [
                r.id,
                r.title,
                r.site or "",
                getattr(r.status, "value", str(r.status)),
                r.progress,
                _iso(r.start_date),
                _iso(r.deadline),
                r.duration_days,
                _iso(r.earliest_start),
                _iso(r.earliest_finish),
                _iso(r.latest_start),
                _iso(r.latest_finish),
                r.slack_days,
                "Yes" if r.is_critical else "No",
            ]
            for col_index, value in enumerate(values, start=1):
                cell = ws.cell(row=row_index, column=col_index, value=value)
                cell.border = thin_border
                if r.is_critical:
                    cell.fill = critical_fill

        ws.column_dimensions["A"].width = 10
        ws.column_dimensions["B"].width = 32
        ws.column_dimensions["C"].width = 18
        for col_letter in "DEFGHIJKLMN":
            ws.column_dimensions[col_letter].width = 15

        summary = wb.create_sheet("Summary")
        summary["A1"] = "Project finish"
        summary["B1"] = _iso(project_finish)
        summary["A2"] = "Tasks"
        summary["B2"] = len(rows)
        summary["A3"] = "Critical tasks"
        summary["B3"] = sum(1 for r in rows if r.is_critical)
        for key_cell in ("A1", "A2", "A3"):
            summary[key_cell].font = header_font
        summary.column_dimensions["A"].width = 20
        summary.column_dimensions["B"].width = 15

        wb.save(output_path)
        return output_path
