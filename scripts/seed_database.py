#!/usr/bin/env python3
"""
Database seeding script for the Smart Restaurants service.

This script:
- Creates the tables
- Loads restaurant listings from a JSON file
- Optionally creates demo profiles
- Can be run multiple times (idempotent)

Usage:
    python scripts/seed_database.py [--reset] [--data PATH] [--with-demo-users]

Options:
    --reset             Drop existing tables before seeding
    --data PATH         Restaurant JSON file (default: SEED_DATA_PATH)
    --with-demo-users   Create demo profiles when none exist
"""
import sys
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

from config import get_settings
from db_init import initialize_database
from error_handling.logging_config import init_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the Smart Restaurants database")
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    parser.add_argument("--data", default=None, help="Restaurant JSON file")
    parser.add_argument(
        "--with-demo-users",
        action="store_true",
        help="Create demo profiles when none exist"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)

    settings = get_settings()
    init_logging(settings.environment, settings.log_level)

    data_path = args.data or settings.seed_data_path

    print("=" * 50)
    print("Smart Restaurants - Database Setup")
    print("=" * 50 + "\n")

    try:
        summary = initialize_database(
            settings.database_url,
            data_path=data_path,
            reset=args.reset,
            with_demo_users=args.with_demo_users,
        )
    except Exception as e:
        print(f"\n✗ Error during database initialization: {e}", file=sys.stderr)
        return 1

    print("\n================ DATABASE SEEDED ================")
    print(f"Restaurants inserted:   {summary['restaurants']}")
    print(f"Restaurants total:      {summary['total_restaurants']}")
    print(f"Users total:            {summary['total_users']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
