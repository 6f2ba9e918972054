#!/usr/bin/env python3
"""
Orphaned cover image sweep for the Blog API.

Uploads and rows are written in two steps without a shared transaction, so a
crash in between can leave an image file that no blog post references. This
script removes such files once they are older than a grace period.

Usage:
    python scripts/sweep_orphans.py [--grace-minutes N] [--dry-run]

    --grace-minutes: Keep unreferenced files younger than this (default: ORPHAN_GRACE_MINUTES)
    --dry-run: List the files that would be removed without deleting them
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"
load_dotenv(dotenv_path=env_path)

# Add project root to path
sys.path.insert(0, str(project_root))

from blog_api.core.config import settings
from blog_api.core.storage import ImageStore
from blog_api.database.engine import Database
from blog_api.services.blog_service import BlogService


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


def sweep(grace_minutes: int, dry_run: bool = False) -> list[str]:
    database = Database(settings.database_url, echo=settings.DB_ECHO)
    database.connect()
    images = ImageStore(
        upload_dir=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_file_size=settings.MAX_FILE_SIZE,
        allowed_types=settings.ALLOWED_IMAGE_TYPES,
    )
    try:
        with database.session() as session:
            service = BlogService(session, images)
            return service.sweep_orphan_images(
                older_than=timedelta(minutes=grace_minutes),
                dry_run=dry_run
            )
    finally:
        database.dispose()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Remove uploaded cover images that no blog post references"
    )
    parser.add_argument(
        "--grace-minutes",
        type=int,
        default=settings.ORPHAN_GRACE_MINUTES,
        help="Keep unreferenced files younger than this many minutes"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list the files that would be removed"
    )

    args = parser.parse_args()

    try:
        removed = sweep(args.grace_minutes, dry_run=args.dry_run)
    except Exception as e:
        print(f"\n{Colors.RED}✗ Sweep failed:{Colors.RESET}")
        print(f"{Colors.RED}{str(e)}{Colors.RESET}\n")
        sys.exit(1)

    verb = "Would remove" if args.dry_run else "Removed"
    for name in removed:
        print(f"{Colors.YELLOW}-{Colors.RESET} {name}")
    print(f"\n{Colors.BOLD}{Colors.GREEN}✓ {verb} {len(removed)} orphaned image(s){Colors.RESET}\n")


if __name__ == "__main__":
    main()
