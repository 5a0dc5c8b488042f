"""
REST endpoints for the Smart Restaurants API.

Routes stay thin: each one resolves the caller and the database session
through dependencies, delegates to a service, and returns a schema.
Service exceptions are turned into JSON errors by the handlers registered
in ``api.app``.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config import Settings
from models.database import User, get_db
from models.schemas import (
    BookingResult,
    FavoriteRequest,
    RecommendationResponse,
    ReservationCreate,
    ReservationDetail,
    RestaurantResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    UserCreate,
    UserResponse,
    UserSelect,
    UserUpdate,
)
from services.booking_service import BookingService
from services.favorite_service import FavoriteService
from services.recommendation_service import RecommendationService
from services.restaurant_service import RestaurantService, to_response
from services.review_service import ReviewService
from services.user_service import UserService
from .dependencies import SESSION_USER_KEY, get_app_settings, get_current_user, require_user

router = APIRouter(prefix="/api")

_TRUTHY = {"1", "true", "yes", "on"}


# ============================================================================
# Health & catalog
# ============================================================================

@router.get("/health")
def health() -> dict:
    return {"ok": True}


@router.get("/restaurants", response_model=list[RestaurantResponse])
def list_restaurants(
    city: str = "",
    cuisine: str = "",
    price: str = "",
    open_now: Optional[str] = None,
    db: Session = Depends(get_db),
) -> list[RestaurantResponse]:
    only_open = (open_now or "").strip().lower() in _TRUTHY
    return RestaurantService(db).search(
        city=city.strip(),
        cuisine=cuisine.strip(),
        price=price.strip(),
        open_now=only_open,
    )


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(restaurant_id: int, db: Session = Depends(get_db)) -> RestaurantResponse:
    return to_response(RestaurantService(db).get(restaurant_id))


@router.get("/metadata")
def metadata(db: Session = Depends(get_db)) -> dict:
    service = RestaurantService(db)
    return {"cities": service.list_cities(), "cuisines": service.list_cuisines()}


# ============================================================================
# Reservations
# ============================================================================

@router.post("/reservations", response_model=BookingResult, status_code=201)
def create_reservation(
    body: ReservationCreate,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
) -> BookingResult:
    service = BookingService(db, default_capacity=settings.default_table_capacity)
    confirmation = service.reserve(
        restaurant_id=body.restaurant_id,
        party_size=body.party_size,
        booking_date=body.date,
        booking_time=body.time,
        name=body.name,
        user_id=user.id if user else None,
    )
    reservation = confirmation.reservation
    return BookingResult(
        id=reservation.id,
        restaurant_id=reservation.restaurant_id,
        user_id=reservation.user_id,
        name=reservation.name,
        party_size=reservation.party_size,
        date=reservation.date,
        time=reservation.time,
        created_at=reservation.created_at,
        capacity=confirmation.capacity,
        tables_remaining=confirmation.tables_remaining,
    )


@router.get("/reservations", response_model=list[ReservationDetail])
def list_reservations(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
) -> list[ReservationDetail]:
    return BookingService(db).list_reservations(user)


@router.get("/user/reservations", response_model=list[ReservationDetail])
def list_user_reservations(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[ReservationDetail]:
    return BookingService(db).list_reservations(user)


@router.delete("/user/reservations/{reservation_id}")
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> dict:
    BookingService(db).cancel(reservation_id, user)
    return {"ok": True}


# ============================================================================
# Profiles
# ============================================================================

@router.get("/users", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)) -> list[User]:
    return UserService(db).list_users()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db)) -> User:
    return UserService(db).create_user(body.name, body.email, body.preferred_cuisine)


@router.post("/users/select")
def select_user(body: UserSelect, request: Request, db: Session = Depends(get_db)) -> dict:
    user = UserService(db).get_user(body.user_id)
    request.session[SESSION_USER_KEY] = user.id
    return {"ok": True}


@router.get("/users/active", response_model=UserResponse)
def active_user(user: User = Depends(require_user)) -> User:
    return user


@router.post("/users/update", response_model=UserResponse)
def update_user(
    body: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> User:
    return UserService(db).update_user(user.id, body.name, body.email, body.preferred_cuisine)


# ============================================================================
# Favorites
# ============================================================================

@router.get("/user/favorites", response_model=list[RestaurantResponse])
def list_favorites(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[RestaurantResponse]:
    return [to_response(r) for r in FavoriteService(db).list_favorites(user.id)]


@router.post("/user/favorites")
def add_favorite(
    body: FavoriteRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> dict:
    FavoriteService(db).add_favorite(user.id, body.restaurant_id)
    return {"ok": True}


@router.delete("/user/favorites")
def remove_favorite(
    body: FavoriteRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> dict:
    FavoriteService(db).remove_favorite(user.id, body.restaurant_id)
    return {"ok": True}


# ============================================================================
# Reviews
# ============================================================================

@router.post("/reviews", status_code=201)
def create_review(
    body: ReviewCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> dict:
    review = ReviewService(db).create_review(
        user.id, body.restaurant_id, body.rating, body.review_text
    )
    return {"ok": True, "id": review.id}


@router.get("/user/reviews", response_model=list[ReviewResponse])
def list_reviews(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> list[ReviewResponse]:
    return ReviewService(db).list_reviews(user.id)


@router.put("/reviews/{review_id}")
def update_review(
    review_id: int,
    body: ReviewUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> dict:
    ReviewService(db).update_review(user.id, review_id, body.rating, body.review_text)
    return {"ok": True}


@router.delete("/reviews/{review_id}")
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
) -> dict:
    ReviewService(db).delete_review(user.id, review_id)
    return {"ok": True}


# ============================================================================
# Recommendations
# ============================================================================

@router.get("/user/recommendations", response_model=list[RecommendationResponse])
def recommendations(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
    settings: Settings = Depends(get_app_settings),
) -> list[RecommendationResponse]:
    service = RecommendationService(
        db,
        tie_break=settings.recommendation_tie_break,
        limit=settings.recommendation_limit,
    )
    return [
        RecommendationResponse(**to_response(pick.restaurant).model_dump(), score=pick.score)
        for pick in service.for_user(user)
    ]
