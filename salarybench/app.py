import argparse
import json
from pathlib import Path

from . import __version__
from .config import get_settings
from .database import Report, init_database, get_session
from .env import load_env
from .errors import ReportNotFoundError


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.db) if args.db else get_settings().db_path


def _tier_label(value) -> str:
    from pipelines.benchmark.models import MatchTier

    return MatchTier(value).label if value else "-"


def cmd_init_db(args: argparse.Namespace) -> None:
    db_path = _db_path(args)
    init_database(db_path)
    print(f"Database ready: {db_path}")


def cmd_finalize(args: argparse.Namespace) -> None:
    from pipelines.benchmark.finalize import ReportFinalizer

    db_path = _db_path(args)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")

    session = get_session(db_path)
    try:
        report = ReportFinalizer(session).finalize(args.report_id)
        print(f"Report: {report.id}")
        print(f"Status: {report.status}")
        print(f"Match: {_tier_label(report.payslip_match)}")
    except ReportNotFoundError as e:
        raise SystemExit(str(e))
    finally:
        session.close()


def cmd_finalize_pending(args: argparse.Namespace) -> None:
    from pipelines.benchmark.finalize import ReportFinalizer

    db_path = _db_path(args)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")

    session = get_session(db_path)
    try:
        reports = ReportFinalizer(session).finalize_pending()
    finally:
        session.close()
    print(f"Finalized {len(reports)} report(s)")


def cmd_show(args: argparse.Namespace) -> None:
    db_path = _db_path(args)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")

    session = get_session(db_path)
    try:
        report = session.get(Report, args.report_id)
        if report is None:
            raise SystemExit(f"Report not found: {args.report_id}")

        print(f"ID: {report.id}")
        print(f"  Status: {report.status}")
        print(f"  Match: {_tier_label(report.payslip_match)}")
        print(
            f"  Percentiles: {report.lower_percentile} / {report.median} / "
            f"{report.upper_percentile}"
        )
        print(f"  Metadata: {json.dumps(report.match_metadata, ensure_ascii=False)}")
        print(f"  Open postings ({get_settings().postings_source}): {report.active_job_postings_count}")
        if report.description:
            print(f"  Description: {report.description}")
        if report.conclusion:
            print()
            print(report.conclusion)
    finally:
        session.close()


def main(argv=None):
    # Load .env if present (SALARYBENCH_DB_PATH, SALARYBENCH_LOG_LEVEL, etc.)
    load_env()
    parser = argparse.ArgumentParser(prog="salarybench", description="Salary benchmark reports")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create the database tables")
    ini.add_argument("--db", help="Path to SQLite database (default: SALARYBENCH_DB_PATH)")
    ini.set_defaults(func=cmd_init_db)

    fin = subparsers.add_parser("finalize", help="Finalize a single report")
    fin.add_argument("report_id", type=int, help="Report id")
    fin.add_argument("--db", help="Path to SQLite database (default: SALARYBENCH_DB_PATH)")
    fin.set_defaults(func=cmd_finalize)

    pend = subparsers.add_parser("finalize-pending", help="Finalize every report in draft")
    pend.add_argument("--db", help="Path to SQLite database (default: SALARYBENCH_DB_PATH)")
    pend.set_defaults(func=cmd_finalize_pending)

    shw = subparsers.add_parser("show", help="Print a report's statistics and conclusion")
    shw.add_argument("report_id", type=int, help="Report id")
    shw.add_argument("--db", help="Path to SQLite database (default: SALARYBENCH_DB_PATH)")
    shw.set_defaults(func=cmd_show)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
