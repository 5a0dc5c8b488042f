"""
Pydantic models for request validation and response serialization.
"""
from datetime import date, time, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer


class RestaurantResponse(BaseModel):
    """
    Restaurant listing as returned by the API, annotated with ``open_now``.
    """
    id: int
    name: str
    city: str
    cuisine: str
    price: str
    address: str
    tables: Optional[int] = None
    hours: Optional[dict] = None
    open_now: bool = False

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 7,
                "name": "Thames Street Oyster House",
                "city": "Baltimore",
                "cuisine": "Seafood",
                "price": "$$$",
                "address": "1728 Thames St, Baltimore, MD",
                "tables": 12,
                "hours": {"fri": [["11:30", "23:00"]], "sat": [["11:30", "01:00"]]},
                "open_now": True
            }
        }
    )


class RecommendationResponse(RestaurantResponse):
    """Recommended restaurant with its affinity score."""
    score: int


class ReservationCreate(BaseModel):
    """
    Pydantic model for incoming reservation requests.

    Accepts the camelCase field names the browser sends as well as
    snake_case ones. ``party_size`` is passed through unconverted and
    checked by the booking service.
    """
    restaurant_id: int = Field(
        ...,
        validation_alias=AliasChoices("restaurantId", "restaurant_id"),
        description="Restaurant to book"
    )
    name: str = Field(..., max_length=255, description="Name on the reservation")
    party_size: Any = Field(
        ...,
        validation_alias=AliasChoices("partySize", "party_size"),
        description="Number of guests"
    )
    date: date
    time: str = Field(..., description="Requested time of day, HH:MM")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "restaurantId": 7,
                "name": "Jordan Lee",
                "partySize": 4,
                "date": "2024-06-01",
                "time": "18:10"
            }
        }
    )


class ReservationResponse(BaseModel):
    """
    Pydantic model for formatting reservation data in API responses.
    """
    id: int
    restaurant_id: int
    user_id: Optional[int] = None
    name: str
    party_size: int
    date: date
    time: time
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class BookingResult(ReservationResponse):
    """Newly created reservation with the slot's remaining capacity."""
    capacity: int
    tables_remaining: int = Field(..., alias="tablesRemaining")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ReservationDetail(ReservationResponse):
    """Reservation joined with the restaurant it belongs to."""
    restaurant_name: Optional[str] = None
    restaurant_city: Optional[str] = None
    restaurant_cuisine: Optional[str] = None
    restaurant_address: Optional[str] = None


class UserCreate(BaseModel):
    """
    Profile creation payload. ``name`` is checked by the service so that a
    missing or blank name produces the same error.
    """
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    preferred_cuisine: Optional[str] = Field(None, max_length=120)


class UserUpdate(UserCreate):
    pass


class UserSelect(BaseModel):
    user_id: int


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    preferred_cuisine: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FavoriteRequest(BaseModel):
    restaurant_id: int


class ReviewCreate(BaseModel):
    """
    Review payload. The rating is passed through unconverted; the review
    service accepts only integers from 1 to 5.
    """
    restaurant_id: int
    rating: Any
    review_text: Optional[str] = ""


class ReviewUpdate(BaseModel):
    rating: Any
    review_text: Optional[str] = ""


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    restaurant_id: int
    rating: int
    review_text: str
    created_at: datetime
    restaurant_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
