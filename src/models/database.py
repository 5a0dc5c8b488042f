"""
SQLAlchemy database models and session management for the Smart Restaurants service.
"""
import json
from contextlib import contextmanager
from datetime import datetime
from typing import Generator, Optional
from loguru import logger

from sqlalchemy import (
    create_engine,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    Date,
    Time,
    DateTime,
    Index,
    UniqueConstraint,
    CheckConstraint,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, Session, sessionmaker
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

# Create declarative base
Base = declarative_base()

# Database engine and session factory (initialized by init_db)
engine: Engine | None = None
SessionLocal: sessionmaker | None = None


class Restaurant(Base):
    """
    Restaurant listing. Created at seed time, read-only afterwards.
    """
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    city = Column(String(120), nullable=False, default="")
    cuisine = Column(String(120), nullable=False, default="")
    price = Column(String(8), nullable=False, default="")
    address = Column(String(255), nullable=False, default="")
    # Number of tables; the booking engine falls back to a default when unset
    tables = Column(Integer, nullable=True)
    # JSON text: {"mon": [["11:00", "22:00"]], ...}
    hours = Column(Text, nullable=True)

    reservations = relationship("Reservation", back_populates="restaurant")

    __table_args__ = (
        Index("ix_restaurant_city", "city"),
        Index("ix_restaurant_cuisine", "cuisine"),
    )

    def __repr__(self) -> str:
        return (
            f"<Restaurant(id={self.id}, name='{self.name}', city='{self.city}', "
            f"cuisine='{self.cuisine}', price='{self.price}', tables={self.tables})>"
        )


class User(Base):
    """
    User profile. Identity is supplied per request, never held globally.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, default="")
    preferred_cuisine = Column(String(120), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<User(id={self.id}, name='{self.name}', "
            f"preferred_cuisine='{self.preferred_cuisine}')>"
        )


class Reservation(Base):
    """
    Reservation of one table for a restaurant, date and 30-minute slot.
    Never updated; deleted on cancellation by its owner.
    """
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    name = Column(String(255), nullable=False)
    party_size = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    restaurant = relationship("Restaurant", back_populates="reservations")

    __table_args__ = (
        CheckConstraint("party_size >= 1", name="ck_reservation_party_size"),
        # Capacity counting looks up reservations per slot
        Index("ix_reservation_slot", "restaurant_id", "date", "time"),
        Index("ix_reservation_user", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, restaurant_id={self.restaurant_id}, "
            f"date={self.date}, time={self.time}, party_size={self.party_size}, "
            f"name='{self.name}')>"
        )


class Favorite(Base):
    """
    A (user, restaurant) bookmark, unique per pair.
    """
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    restaurant = relationship("Restaurant")

    __table_args__ = (
        UniqueConstraint("user_id", "restaurant_id", name="uq_favorite_user_restaurant"),
    )

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, restaurant_id={self.restaurant_id})>"


class Review(Base):
    """
    A user's rating of a restaurant, unique per (user, restaurant).
    """
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    restaurant = relationship("Restaurant")

    __table_args__ = (
        UniqueConstraint("user_id", "restaurant_id", name="uq_review_user_restaurant"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, user_id={self.user_id}, "
            f"restaurant_id={self.restaurant_id}, rating={self.rating})>"
        )


def encode_hours(hours: Optional[dict]) -> Optional[str]:
    """Serialize weekly hours for storage in the restaurant row."""
    if hours is None:
        return None
    return json.dumps(hours)


# ============================================================================
# Engine and sessions
# ============================================================================

def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def setup_sqlite_events(engine: Engine) -> None:
    """
    Configure SQLite connections for transactional booking.

    The driver's implicit transaction handling is disabled and every
    transaction starts with BEGIN IMMEDIATE, which takes the write lock
    up front. Concurrent transactions therefore run one after another,
    and the capacity count and the insert of a booking cannot interleave
    with another booking.

    Args:
        engine: SQLAlchemy engine instance bound to SQLite
    """

    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("SQLite connection established")

    @event.listens_for(engine, "begin")
    def receive_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine with the connection settings the service relies on.

    Args:
        database_url: SQLAlchemy connection string

    Returns:
        SQLAlchemy Engine instance
    """
    if _is_sqlite(database_url):
        kwargs = {
            "connect_args": {"check_same_thread": False, "timeout": 30},
        }
        # In-memory databases exist per connection; share a single one
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        new_engine = create_engine(database_url, echo=False, **kwargs)
        setup_sqlite_events(new_engine)
        return new_engine

    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Enable connection health checks
        pool_size=5,
        max_overflow=10,
    )


def init_db(database_url: str | None = None) -> Engine:
    """
    Initialize database engine and session factory.

    Args:
        database_url: Optional database connection string. If not provided,
                     the configured DATABASE_URL is used.

    Returns:
        SQLAlchemy Engine instance
    """
    global engine, SessionLocal

    if database_url is None:
        from config import get_settings
        database_url = get_settings().database_url

    if engine is not None:
        engine.dispose()

    engine = create_db_engine(database_url)

    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )

    logger.info(f"Database initialized: {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_tables() -> None:
    """
    Create all tables in the database.

    Raises:
        RuntimeError: If database engine is not initialized
    """
    if engine is None:
        raise RuntimeError("Database engine not initialized. Call init_db() first.")

    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all tables. Used by the seeding script's --reset option."""
    if engine is None:
        raise RuntimeError("Database engine not initialized. Call init_db() first.")

    Base.metadata.drop_all(bind=engine)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions with automatic cleanup.

    Yields:
        SQLAlchemy Session instance

    Example:
        with get_db_session() as session:
            restaurant = session.query(Restaurant).first()

    Raises:
        RuntimeError: If session factory is not initialized
    """
    if SessionLocal is None:
        raise RuntimeError("Session factory not initialized. Call init_db() first.")

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function for getting database sessions in FastAPI routes.

    Yields:
        SQLAlchemy Session instance
    """
    with get_db_session() as session:
        yield session
