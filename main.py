# main.py
import argparse
import logging
import sys
from pathlib import Path

from infra.db.base import SessionLocal, init_db
from infra.logging_config import setup_logging
from infra.operational_support import bind_trace_id
from infra.services import build_service_graph

from core.exceptions import DomainError
from core.reporting.api import generate_gantt_excel, generate_gantt_png

logger = logging.getLogger(__name__)


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="siteplan",
        description="Export the critical-path Gantt schedule of the local task database.",
    )
    parser.add_argument("--site", default=None, help="only schedule root tasks of this site")
    parser.add_argument("--png", type=Path, default=None, help="write a Gantt chart image here")
    parser.add_argument("--xlsx", type=Path, default=None, help="write the schedule workbook here")
    parser.add_argument("--rollup", action="store_true", help="recompute every parent before exporting")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    init_db()

    session = SessionLocal()
    graph = build_service_graph(session)
    try:
        with bind_trace_id():
            if args.rollup:
                changed = graph.rollup_engine.rollup_all()
                session.commit()
                logger.info("Rollup refreshed %d parent task(s)", len(changed))

            schedule = graph.gantt_service.build_gantt_schedule(site=args.site)
            for row in schedule.rows:
                flag = "*" if row.is_critical else " "
                print(
                    f"{flag} {row.id:>5} {row.title[:40]:<40} "
                    f"ES={row.earliest_start} EF={row.earliest_finish} slack={row.slack_days}"
                )
            print(f"Project finish: {schedule.project_finish}")

            if args.png:
                generate_gantt_png(graph.gantt_service, args.png, site=args.site)
            if args.xlsx:
                generate_gantt_excel(graph.gantt_service, args.xlsx, site=args.site)
    except (DomainError, ValueError) as exc:
        logger.error(f"Export failed: {exc}")
        return 1
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
