#!/usr/bin/env python3
"""
Seed script for the Blog API.

Creates the blogs table if needed and inserts sample posts without cover
images.

Usage:
    python scripts/seed_data.py [--count N]
"""

import argparse
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"
load_dotenv(dotenv_path=env_path)

# Add project root to path
sys.path.insert(0, str(project_root))

from blog_api.core.config import settings
from blog_api.crud.blog import blog_crud
from blog_api.database.engine import Database
from blog_api.schemas.blog import BlogPostCreate


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


SAMPLE_AUTHORS = ["Ada Lovelace", "Grace Hopper", "Alan Turing", "Margaret Hamilton"]

SAMPLE_TOPICS = [
    "Getting started with FastAPI",
    "Designing pagination that scales",
    "Storing uploads next to your database",
    "Writing tests that read like documentation",
    "A short history of relational databases",
    "What makes an API pleasant to use",
]


def seed_blogs(count: int) -> int:
    database = Database(settings.database_url, echo=settings.DB_ECHO)
    database.connect()
    try:
        database.create_tables()
        with database.session() as session:
            for i in range(count):
                topic = SAMPLE_TOPICS[i % len(SAMPLE_TOPICS)]
                post = BlogPostCreate(
                    title=f"{topic} (part {i // len(SAMPLE_TOPICS) + 1})",
                    author=SAMPLE_AUTHORS[i % len(SAMPLE_AUTHORS)],
                    content=f"{topic}.\n\nThis is sample post number {i + 1}.",
                )
                created = blog_crud.create_blog_post(session, post.model_dump())
                print(f"{Colors.GREEN}✓{Colors.RESET} Created blog {created.id}: {created.title}")
    finally:
        database.dispose()
    return count


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the blog database with sample posts")
    parser.add_argument("--count", type=int, default=15, help="Number of posts to create")
    args = parser.parse_args()

    try:
        created = seed_blogs(args.count)
    except Exception as e:
        print(f"\n{Colors.RED}✗ Error seeding database:{Colors.RESET}")
        print(f"{Colors.RED}{str(e)}{Colors.RESET}\n")
        sys.exit(1)

    print(f"\n{Colors.BOLD}{Colors.CYAN}Seeded {created} blog posts{Colors.RESET}\n")


if __name__ == "__main__":
    main()
