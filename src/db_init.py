"""
Database initialization and seeding for the Smart Restaurants service.

This module:
1. Initializes the database connection
2. Creates all tables
3. Loads restaurant listings from a JSON file (skipped when already loaded)
"""
import json
from pathlib import Path
from typing import Iterable, List, Optional, Union

from loguru import logger
from sqlalchemy.orm import Session

from models.database import (
    init_db,
    create_tables,
    drop_tables,
    get_db_session,
    encode_hours,
    Restaurant,
    User,
)

DEMO_USERS = [
    {"name": "Avery Chen", "email": "avery@example.com", "preferred_cuisine": "Italian"},
    {"name": "Sam Ortiz", "email": "sam@example.com", "preferred_cuisine": "Seafood"},
]


def load_restaurant_data(path: Union[str, Path]) -> List[dict]:
    """
    Read restaurant entries from a JSON file.

    The file holds a list of objects with ``name, city, cuisine, price,
    address, tables, hours``. A missing or unparsable file yields an
    empty list.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Missing seed file: {path}, skipping")
        return []

    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        logger.error(f"Failed to parse {path}: {e}")
        return []

    if not isinstance(entries, list):
        logger.error(f"Seed file {path} must contain a list of restaurants")
        return []
    return entries


def seed_restaurants(session: Session, entries: Iterable[dict]) -> int:
    """
    Insert restaurants unless the table already has rows.

    Returns:
        Number of restaurants inserted
    """
    existing = session.query(Restaurant).count()
    if existing > 0:
        logger.info(f"Restaurants already seeded ({existing} rows)")
        return 0

    inserted = 0
    for entry in entries:
        name = entry.get("name")
        if not name:
            logger.warning(f"Skipping restaurant without a name: {entry}")
            continue
        session.add(Restaurant(
            name=name,
            city=entry.get("city", ""),
            cuisine=entry.get("cuisine", ""),
            price=entry.get("price", ""),
            address=entry.get("address", ""),
            tables=entry.get("tables"),
            hours=encode_hours(entry.get("hours")),
        ))
        inserted += 1

    session.commit()
    logger.info(f"Restaurants inserted: {inserted}")
    return inserted


def seed_demo_users(session: Session) -> int:
    """Create the demo profiles if no profile exists yet."""
    if session.query(User).count() > 0:
        return 0

    for profile in DEMO_USERS:
        session.add(User(**profile))
    session.commit()
    logger.info(f"Demo users inserted: {len(DEMO_USERS)}")
    return len(DEMO_USERS)


def initialize_database(
    database_url: Optional[str] = None,
    data_path: Optional[Union[str, Path]] = None,
    reset: bool = False,
    with_demo_users: bool = False,
) -> dict:
    """
    Initialize the database: create tables and seed initial data.

    Args:
        database_url: Optional database connection string. If not provided,
                     the configured DATABASE_URL is used.
        data_path: JSON file with restaurants; None skips restaurant seeding
        reset: Drop all tables first
        with_demo_users: Also create demo profiles

    Returns:
        Counts of inserted rows
    """
    engine = init_db(database_url)
    logger.info(f"Connected to database: {engine.url.database}")

    if reset:
        logger.warning("Dropping all tables")
        drop_tables()

    create_tables()

    summary = {"restaurants": 0, "users": 0}
    with get_db_session() as session:
        if data_path is not None:
            summary["restaurants"] = seed_restaurants(session, load_restaurant_data(data_path))
        if with_demo_users:
            summary["users"] = seed_demo_users(session)

        summary["total_restaurants"] = session.query(Restaurant).count()
        summary["total_users"] = session.query(User).count()

    logger.info(f"Database initialization complete: {summary}")
    return summary
