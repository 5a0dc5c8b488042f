"""
Models package - SQLAlchemy ORM models and Pydantic schemas.
"""
from .database import (
    Base,
    Restaurant,
    User,
    Reservation,
    Favorite,
    Review,
    encode_hours,
    create_db_engine,
    init_db,
    create_tables,
    drop_tables,
    get_db_session,
    get_db,
)

from .schemas import (
    RestaurantResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationDetail,
    BookingResult,
    UserCreate,
    UserUpdate,
    UserSelect,
    UserResponse,
    FavoriteRequest,
    ReviewCreate,
    ReviewUpdate,
    ReviewResponse,
)

__all__ = [
    # Database models
    "Base",
    "Restaurant",
    "User",
    "Reservation",
    "Favorite",
    "Review",
    # Database utilities
    "encode_hours",
    "create_db_engine",
    "init_db",
    "create_tables",
    "drop_tables",
    "get_db_session",
    "get_db",
    # Pydantic schemas
    "RestaurantResponse",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationDetail",
    "BookingResult",
    "UserCreate",
    "UserUpdate",
    "UserSelect",
    "UserResponse",
    "FavoriteRequest",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
]
