"""
Restaurant catalog queries: search with filters, single lookups and the
city/cuisine lists used to populate search filters.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.database import Restaurant
from models.schemas import RestaurantResponse
from services.hours import is_open_now, parse_hours
from error_handling.exceptions import NotFoundError
from error_handling.error_messages import RESTAURANT_NOT_FOUND
from error_handling.handlers import handle_errors


def to_response(restaurant: Restaurant, at: Optional[datetime] = None) -> RestaurantResponse:
    """Serialize a restaurant with decoded hours and its ``open_now`` flag."""
    hours = parse_hours(restaurant.hours)
    return RestaurantResponse(
        id=restaurant.id,
        name=restaurant.name,
        city=restaurant.city or "",
        cuisine=restaurant.cuisine or "",
        price=restaurant.price or "",
        address=restaurant.address or "",
        tables=restaurant.tables,
        hours=hours,
        open_now=is_open_now(hours, at),
    )


class RestaurantService:

    def __init__(self, session: Session):
        self.session = session

    @handle_errors("search_restaurants")
    def search(
        self,
        city: str = "",
        cuisine: str = "",
        price: str = "",
        open_now: bool = False,
        at: Optional[datetime] = None,
    ) -> List[RestaurantResponse]:
        """
        Search restaurants.

        Args:
            city: Case-insensitive substring of the city
            cuisine: Case-insensitive substring of the cuisine
            price: Exact price tier
            open_now: Only return restaurants open at ``at``
            at: Moment used for ``open_now`` (defaults to now)

        Returns:
            Matching restaurants ordered by id
        """
        query = self.session.query(Restaurant)

        if city:
            query = query.filter(func.lower(Restaurant.city).contains(city.lower(), autoescape=True))
        if cuisine:
            query = query.filter(func.lower(Restaurant.cuisine).contains(cuisine.lower(), autoescape=True))
        if price:
            query = query.filter(Restaurant.price == price)

        moment = at or datetime.now()
        results = [to_response(r, moment) for r in query.order_by(Restaurant.id).all()]

        if open_now:
            results = [r for r in results if r.open_now]
        return results

    @handle_errors("get_restaurant")
    def get(self, restaurant_id: int) -> Restaurant:
        restaurant = self.session.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError(
                RESTAURANT_NOT_FOUND,
                resource="restaurant",
                resource_id=restaurant_id
            )
        return restaurant

    @handle_errors("list_cities")
    def list_cities(self) -> List[str]:
        rows = self.session.query(Restaurant.city).distinct().all()
        return sorted({city for (city,) in rows if city})

    @handle_errors("list_cuisines")
    def list_cuisines(self) -> List[str]:
        rows = self.session.query(Restaurant.cuisine).distinct().all()
        return sorted({cuisine for (cuisine,) in rows if cuisine})
