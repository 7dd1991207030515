"""
Staffing console CLI.

Usage:
  # Create tables in the configured store (STAFFING_DATABASE_URL)
  staffing-console init-db

  # Load sample hospitals and anaesthesiologists into an empty store
  staffing-console seed

  # Print staffing coverage
  staffing-console dashboard --all

  # Serve the API
  staffing-console serve --port 8000
"""

import argparse
import logging
import sys

from .config import load_settings
from .coverage import compute_coverage
from .errors import InitializationError
from .service import StaffingDataService


def _service(settings) -> StaffingDataService:
    return StaffingDataService.from_settings(settings)


def _load_everything(service: StaffingDataService) -> None:
    service.refresh()
    while service.has_more_people:
        if not service.load_more_people():
            break


def cmd_init_db(args, settings):
    """Create tables."""
    _service(settings)
    print(f"Store ready: {settings.database_url}")


def cmd_seed(args, settings):
    from .seed import seed
    counts = seed(_service(settings))
    if not counts["hospitals"]:
        print("Store already has hospitals; nothing seeded.")
    else:
        print(f"Seeded {counts['hospitals']} hospitals and {counts['people']} people.")


def cmd_dashboard(args, settings):
    """Print totals and per-hospital status. Loads every page of people first."""
    service = _service(settings)
    _load_everything(service)
    summary = compute_coverage(service.hospitals.items, service.people.items)
    print(f"Hospitals:           {summary.total_hospitals}")
    print(f"Anaesthesiologists:  {summary.total_people}")
    print(f"Allocated positions: {summary.total_allocations}")
    print(f"Assigned positions:  {summary.current_assignments}")
    print(f"Vacant positions:    {summary.vacancies}")
    print(f"Critical hospitals:  {summary.critical_hospitals}")
    print(f"Overall staffing:    {summary.overall_percentage}% ({summary.overall_band})")
    rows = summary.hospitals if args.all else summary.top_hospitals
    if rows:
        print()
    for c in rows:
        print(f"  {c.hospital.name[:40]:40s} {c.assigned_count:>3d}/{c.hospital.allocation:<3d} "
              f"{c.percentage:6.1f}%  {c.status.upper()}")
    if not args.all and summary.more_hospitals:
        print(f"  +{summary.more_hospitals} more hospitals")


def cmd_serve(args, settings):
    import uvicorn
    from .webapp.main import create_app

    service = _service(settings)
    service.refresh()
    uvicorn.run(create_app(service), host=args.host, port=args.port, workers=1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Anaesthesia Staffing Console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", help="Command")

    sub.add_parser("init-db", help="Create tables in the configured store")
    sub.add_parser("seed", help="Load sample data into an empty store")

    p_dash = sub.add_parser("dashboard", help="Print staffing coverage")
    p_dash.add_argument("--all", action="store_true", help="List every hospital, not just the first five")

    p_serve = sub.add_parser("serve", help="Run the API server")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except InitializationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    dispatch = {
        "init-db": cmd_init_db,
        "seed": cmd_seed,
        "dashboard": cmd_dashboard,
        "serve": cmd_serve,
    }
    dispatch[args.command](args, settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
