#!/usr/bin/env python3
"""Delete stale files left in the uploads directory by runs that never finished."""

from __future__ import annotations

import argparse

from clipscribe.config import Settings
from clipscribe.services.upload_sweeper import sweep_stale_files


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--dry-run", action="store_true", help="Only list, don't delete")
    parser.add_argument(
        "--max-age-s",
        type=float,
        default=None,
        help="Age threshold in seconds (default: SWEEPER_MAX_AGE_S)",
    )
    args = parser.parse_args()

    settings = Settings()
    max_age = float(args.max_age_s) if args.max_age_s is not None else float(settings.sweeper.max_age_s)
    if max_age < 60:
        raise SystemExit("--max-age-s must be >= 60 so in-flight uploads are never swept")

    removed = sweep_stale_files(settings.uploads_dir, max_age_s=max_age, dry_run=bool(args.dry_run))

    print(f"Uploads dir: {settings.uploads_dir}")
    print(f"Stale files (older than {int(max_age)}s): {len(removed)}")
    for path in removed:
        prefix = "[DRY-RUN] Would delete" if args.dry_run else "Deleted"
        print(f"{prefix}: {path.name}")


if __name__ == "__main__":
    main()
