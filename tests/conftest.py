"""
Pytest configuration and shared fixtures.
"""
import sys
from pathlib import Path
from typing import Generator
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from config import Settings
from models.database import Base, Restaurant, User, create_db_engine, encode_hours, get_db_session
from services.booking_service import BookingService
from error_handling.logging_config import init_logging


EVERY_DAY = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]

SAMPLE_RESTAURANTS = [
    {
        "name": "Harbor Grill",
        "city": "Baltimore",
        "cuisine": "Seafood",
        "price": "$$$",
        "address": "1 Harbor Way",
        "tables": 2,
        "hours": {day: [["11:00", "22:00"]] for day in EVERY_DAY},
    },
    {
        "name": "Trattoria Roma",
        "city": "Baltimore",
        "cuisine": "Italian",
        "price": "$$",
        "address": "12 Little Italy St",
        "tables": None,
        "hours": {"sat": [["18:00", "02:00"]]},
    },
    {
        "name": "Pasta Bar",
        "city": "Annapolis",
        "cuisine": "Italian",
        "price": "$",
        "address": "5 Main St",
        "tables": 0,
        "hours": "not json",
    },
    {
        "name": "Sushi Ko",
        "city": "Frederick",
        "cuisine": "Japanese",
        "price": "$$",
        "address": "40 Market St",
        "tables": 3,
        "hours": None,
    },
    {
        "name": "Crab Shack",
        "city": "Ocean City",
        "cuisine": "Seafood",
        "price": "$",
        "address": "88 Boardwalk",
        "tables": 4,
        "hours": {"sat": [["11:00", "23:00"]]},
    },
    {
        "name": "Taco Town",
        "city": "Frederick",
        "cuisine": "Mexican",
        "price": "$",
        "address": "9 Patrick St",
        "tables": 6,
        "hours": {"sat": [["10:00", "20:00"]]},
    },
]


def make_restaurant(entry: dict) -> Restaurant:
    hours = entry["hours"]
    return Restaurant(
        name=entry["name"],
        city=entry["city"],
        cuisine=entry["cuisine"],
        price=entry["price"],
        address=entry["address"],
        tables=entry["tables"],
        hours=hours if isinstance(hours, str) else encode_hours(hours),
    )


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging():
    init_logging("test")


@pytest.fixture(scope="function")
def test_db_url(tmp_path) -> str:
    """
    Provide a file-backed SQLite database URL for testing.
    Each test gets a fresh database; a file lets several connections share it.
    """
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture(scope="function")
def db_engine(test_db_url: str):
    """
    Create a test database engine with all tables.
    """
    engine = create_db_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """
    Create a database session for testing.
    """
    session = session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def restaurants(db_session: Session) -> dict:
    """
    Sample restaurants keyed by name.
    """
    rows = [make_restaurant(entry) for entry in SAMPLE_RESTAURANTS]
    db_session.add_all(rows)
    db_session.commit()
    return {row.name: row for row in rows}


@pytest.fixture(scope="function")
def user(db_session: Session) -> User:
    user = User(name="Avery Chen", email="avery@example.com", preferred_cuisine="Italian")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope="function")
def other_user(db_session: Session) -> User:
    user = User(name="Sam Ortiz", email="sam@example.com", preferred_cuisine="")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope="function")
def booking_service(db_session: Session, restaurants) -> BookingService:
    """
    Create a BookingService instance for testing.
    """
    return BookingService(db_session)


# ============================================================================
# API fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app_settings(test_db_url: str) -> Settings:
    return Settings(
        database_url=test_db_url,
        environment="test",
        session_secret="test-secret",
        recommendation_tie_break="stable",
    )


@pytest.fixture(scope="function")
def app(app_settings: Settings):
    from api.app import create_app
    return create_app(app_settings)


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture(scope="function")
def api_data(app) -> dict:
    """
    Seed the API's database and return plain ids.

    Uses its own short-lived session so no transaction stays open while
    requests are served.
    """
    with get_db_session() as session:
        rows = [make_restaurant(entry) for entry in SAMPLE_RESTAURANTS]
        avery = User(name="Avery Chen", email="avery@example.com", preferred_cuisine="Italian")
        sam = User(name="Sam Ortiz", email="sam@example.com", preferred_cuisine="")
        session.add_all(rows + [avery, sam])
        session.flush()
        data = {
            "restaurants": {row.name: row.id for row in rows},
            "avery": avery.id,
            "sam": sam.id,
        }
    return data
