"""
Services package - Business logic over the restaurant store.
"""
from .hours import is_open_now, parse_hours
from .slots import normalize_slot, slot_to_time

from .booking_service import (
    BookingService,
    BookingConfirmation,
    resolve_capacity,
)
from .recommendation_service import (
    RecommendationService,
    ScoredRestaurant,
    recommend,
)
from .restaurant_service import RestaurantService
from .user_service import UserService
from .favorite_service import FavoriteService
from .review_service import ReviewService

__all__ = [
    "is_open_now",
    "parse_hours",
    "normalize_slot",
    "slot_to_time",
    "BookingService",
    "BookingConfirmation",
    "resolve_capacity",
    "RecommendationService",
    "ScoredRestaurant",
    "recommend",
    "RestaurantService",
    "UserService",
    "FavoriteService",
    "ReviewService",
]
