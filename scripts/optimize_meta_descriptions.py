"""Bulk-shorten meta descriptions that exceed the 160 character limit.

Dry run by default: prints every published entry whose meta description is
too long, with the optimized replacement. Pass --apply to write the changes.
Writes are metadata-only updates, so publish timestamps are preserved.

    python scripts/optimize_meta_descriptions.py --content-type article
    python scripts/optimize_meta_descriptions.py --apply
"""

import argparse
import sys

from coffee_cms.content_types import CONTENT_TYPE_REGISTRY
from coffee_cms.database import Base, SessionLocal, engine
from coffee_cms.services import ContentService


def _print_report(report) -> None:
    print(f"\n{report.content_type}: {len(report.items)} of {report.checked} published entries need optimization")
    for item in report.items:
        print(f"  {item.title or item.document_id}")
        print(f"    Original ({item.original_length} chars): {item.original[:80]}...")
        print(f"    Optimized ({item.optimized_length} chars): {item.optimized}")
        print(f"    Saved: {item.saved} characters")
    for error in report.errors:
        print(f"  Failed to update entry {error.id}: {error.error}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--content-type",
        action="append",
        choices=sorted(CONTENT_TYPE_REGISTRY),
        help="Content type to process (repeatable; default: all)",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Write the optimized descriptions instead of only reporting them",
    )
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)
    content_types = args.content_type or list(CONTENT_TYPE_REGISTRY)

    db = SessionLocal()
    failed = 0
    try:
        service = ContentService(db)
        for content_type in content_types:
            report = service.optimize_meta_descriptions(content_type, apply=args.apply)
            _print_report(report)
            failed += len(report.errors)
            if args.apply:
                print(f"  Updated {report.updated}, {report.total_saved} characters saved")
    finally:
        db.close()

    if not args.apply:
        print("\nDry run only. Re-run with --apply to write these changes.")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
