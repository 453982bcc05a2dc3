from datetime import date
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from matplotlib.dates import date2num
from matplotlib import ticker

from core.models import GanttRow


class GanttPngRenderer:
    def __init__(self, today: Optional[date] = None):
        self._today = today

    def render(self, rows: List[GanttRow], output_path: Path, title: str = "Site Schedule") -> Path:
        rows = [r for r in rows if r.earliest_start and r.earliest_finish]
        if not rows:
            raise ValueError("No scheduled tasks available for Gantt chart")

        rows.sort(key=lambda r: (r.earliest_start, r.earliest_finish, r.id))

        labels = [f"{r.title} [{r.site}]" if r.site else r.title for r in rows]
        start_nums = [date2num(r.earliest_start) for r in rows]

        fig, ax = plt.subplots(figsize=(12, max(3, 0.45 * len(rows) + 1.5)))

        for i, (r, s) in enumerate(zip(rows, start_nums)):
            d = r.duration_days
            ax.barh(i, d, left=s, height=0.4,
                    color="#ffcccc" if r.is_critical else "#d0d0ff",
                    edgecolor="black", linewidth=0.6)
            if r.progress > 0:
                ax.barh(i, d * r.progress / 100.0, left=s, height=0.4,
                        color="#ff6666" if r.is_critical else "#8080ff")
            if r.slack_days > 0:
                # float: how far the bar could slide without moving the finish
                ax.plot([s + d, s + d + r.slack_days], [i, i],
                        color="grey", linestyle=":", linewidth=1)

        ax.set_yticks(range(len(labels)))
        ax.set_yticklabels(labels, fontsize=9)
        ax.invert_yaxis()

        locator = mdates.AutoDateLocator(minticks=4, maxticks=10)
        ax.xaxis.set_major_locator(locator)
        ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
        ax.xaxis.set_minor_locator(ticker.NullLocator())

        today = self._today or date.today()
        ax.axvline(date2num(today), color="red", linestyle="--", linewidth=1)

        ax.set_title(title)
        ax.grid(True, axis="x", linestyle=":", linewidth=0.5)

        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
        plt.close(fig)

        return output_path
