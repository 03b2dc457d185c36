"""Restrooms store maintenance CLI.

Usage:
    python src/manage.py check                    # audit every indexed location
    python src/manage.py check --location <id>    # audit one location
    python src/manage.py locate "<name>" "<city>" # print the derived location id
"""

import argparse
import sys

from restrooms.aggregation import get_engine
from restrooms.domain import restrooms
from restrooms.location.identity import derive_location_id


def check(location_ids=None) -> int:
    """Print aggregate inconsistencies. Returns the number of locations with problems.

    Runs against the current store and needs an active domain context.
    """
    engine = get_engine()
    if location_ids:
        report = {lid: engine.check_location(lid) for lid in location_ids}
        report = {lid: problems for lid, problems in report.items() if problems}
    else:
        report = engine.check_all()

    if not report:
        print("All locations consistent.")
        return 0

    for location_id, problems in report.items():
        print(f"{location_id}:")
        for problem in problems:
            print(f"  - {problem}")
    return len(report)


def locate(name, city) -> str:
    location_id = derive_location_id(name, city)
    print(location_id)
    return location_id


def main(argv=None):
    parser = argparse.ArgumentParser(description="Restrooms store maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Audit location aggregates against their reviews")
    check_parser.add_argument(
        "--location",
        nargs="*",
        help="Specific location id(s) to audit (default: every indexed location)",
    )

    locate_parser = subparsers.add_parser("locate", help="Print the location id for a name and city")
    locate_parser.add_argument("name")
    locate_parser.add_argument("city")

    args = parser.parse_args(argv)

    if args.command == "check":
        restrooms.init()
        with restrooms.domain_context():
            failures = check(args.location)
        sys.exit(1 if failures else 0)
    elif args.command == "locate":
        locate(args.name, args.city)


if __name__ == "__main__":
    main()
