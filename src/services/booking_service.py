"""
BookingService - Reservation booking logic for the Smart Restaurants service.

This service handles:
- Booking validation (name, party size, date, time)
- Reservation creation with an atomic capacity check per 30-minute slot
- Cancellation by the reservation's owner
- Reservation listings joined with restaurant details
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

from loguru import logger
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from models.database import Reservation, Restaurant, User
from models.schemas import ReservationDetail
from services.slots import slot_to_time
from error_handling.exceptions import (
    ValidationError,
    NotFoundError,
    CapacityExceededError,
)
from error_handling.error_messages import (
    MISSING_FIELDS,
    INVALID_PARTY_SIZE,
    INVALID_DATE,
    RESTAURANT_NOT_FOUND,
    RESERVATION_NOT_FOUND,
    NO_TABLES_AVAILABLE,
)
from error_handling.handlers import handle_errors, handle_database_error
from error_handling.logging_config import log_booking_event, log_performance

DEFAULT_TABLE_CAPACITY = 5


@dataclass
class BookingConfirmation:
    """A stored reservation together with the state of its slot."""
    reservation: Reservation
    capacity: int
    tables_remaining: int


def resolve_capacity(tables, default: int = DEFAULT_TABLE_CAPACITY) -> int:
    """
    Effective number of reservations a restaurant accepts per slot.

    Args:
        tables: The restaurant's recorded table count
        default: Capacity used when the count is missing or not positive

    Returns:
        Positive capacity
    """
    if isinstance(tables, int) and not isinstance(tables, bool) and tables > 0:
        return tables
    return default


class BookingService:
    """
    Service class that encapsulates reservation business logic.

    The capacity check and the insert of a reservation run inside one
    transaction. On SQLite the engine opens every transaction with
    BEGIN IMMEDIATE; on server databases the restaurant row is locked
    with SELECT ... FOR UPDATE. Either way concurrent bookings for the
    same restaurant are serialized and a slot never exceeds capacity.
    """

    def __init__(self, session: Session, default_capacity: int = DEFAULT_TABLE_CAPACITY):
        """
        Initialize the booking service with a database session.

        Args:
            session: SQLAlchemy database session
            default_capacity: Capacity for restaurants without a valid table count
        """
        self.session = session
        self.default_capacity = default_capacity

    def validate_booking_request(
        self,
        name: Optional[str],
        party_size,
        booking_date: Union[date, str, None],
    ) -> date:
        """
        Validate the caller-supplied booking fields.

        Args:
            name: Name on the reservation
            party_size: Number of guests
            booking_date: Calendar date or ISO "YYYY-MM-DD" string

        Returns:
            The booking date as ``datetime.date``

        Raises:
            ValidationError: If a field is missing or malformed
        """
        if name is None or not str(name).strip():
            raise ValidationError(MISSING_FIELDS, field="name", value=name)

        if isinstance(party_size, bool) or not isinstance(party_size, int) or party_size < 1:
            raise ValidationError(INVALID_PARTY_SIZE, field="party_size", value=party_size)

        if isinstance(booking_date, datetime):
            return booking_date.date()
        if isinstance(booking_date, date):
            return booking_date
        try:
            return date.fromisoformat(str(booking_date))
        except ValueError:
            raise ValidationError(INVALID_DATE, field="date", value=booking_date)

    def count_reservations(self, restaurant_id: int, booking_date: date, slot) -> int:
        """Number of reservations already held in one slot."""
        return self.session.query(func.count(Reservation.id)).filter(
            Reservation.restaurant_id == restaurant_id,
            Reservation.date == booking_date,
            Reservation.time == slot,
        ).scalar() or 0

    @log_performance("reservation_create")
    def reserve(
        self,
        restaurant_id: int,
        party_size: int,
        booking_date: Union[date, str],
        booking_time,
        name: str,
        user_id: Optional[int] = None,
    ) -> BookingConfirmation:
        """
        Create a reservation if the slot still has a free table.

        This method performs an atomic transaction:
        1. Look up (and lock) the restaurant
        2. Resolve its capacity
        3. Count reservations in the normalized slot
        4. Insert the reservation if the count is below capacity

        Args:
            restaurant_id: Restaurant to book
            party_size: Number of guests
            booking_date: Reservation date
            booking_time: Requested time, snapped to its 30-minute slot
            name: Name on the reservation
            user_id: Booking user, if the caller identified one

        Returns:
            BookingConfirmation with the stored reservation

        Raises:
            ValidationError: If booking fields are invalid
            NotFoundError: If the restaurant does not exist
            CapacityExceededError: If every table of the slot is taken
            DatabaseError: If the database operation fails
        """
        booking_date = self.validate_booking_request(name, party_size, booking_date)
        slot = slot_to_time(booking_time)

        try:
            restaurant = self.session.query(Restaurant).filter(
                Restaurant.id == restaurant_id
            ).with_for_update().first()

            if restaurant is None:
                raise NotFoundError(
                    RESTAURANT_NOT_FOUND,
                    resource="restaurant",
                    resource_id=restaurant_id
                )

            capacity = resolve_capacity(restaurant.tables, self.default_capacity)
            count = self.count_reservations(restaurant.id, booking_date, slot)

            if count >= capacity:
                log_booking_event(
                    "REJECTED",
                    user_id=user_id,
                    details={
                        "restaurant_id": restaurant.id,
                        "date": booking_date.isoformat(),
                        "time": slot.strftime("%H:%M"),
                        "capacity": capacity,
                    }
                )
                raise CapacityExceededError(
                    NO_TABLES_AVAILABLE,
                    restaurant_id=restaurant.id,
                    capacity=capacity,
                    booked=count,
                    date=booking_date,
                    time=slot,
                )

            reservation = Reservation(
                restaurant_id=restaurant.id,
                user_id=user_id,
                name=str(name).strip(),
                party_size=party_size,
                date=booking_date,
                time=slot,
                created_at=datetime.utcnow(),
            )
            self.session.add(reservation)

            # Commit transaction
            self.session.commit()

        except (NotFoundError, CapacityExceededError):
            self.session.rollback()
            raise

        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error creating reservation: {str(e)}")
            raise handle_database_error(e, "reserve") from e

        log_booking_event(
            "CREATED",
            user_id=user_id,
            reservation_id=reservation.id,
            details={
                "restaurant_id": restaurant.id,
                "date": booking_date.isoformat(),
                "time": slot.strftime("%H:%M"),
                "party_size": party_size,
            }
        )

        return BookingConfirmation(
            reservation=reservation,
            capacity=capacity,
            tables_remaining=max(0, capacity - (count + 1)),
        )

    @handle_errors("cancel_reservation")
    def cancel(self, reservation_id: int, user: User) -> None:
        """
        Delete a reservation owned by ``user``.

        A reservation is owned by the user whose id it carries; a
        reservation stored without a user id is owned by the user whose
        name matches the name on it.

        Raises:
            NotFoundError: If the reservation is absent or owned by someone else
        """
        reservation = self.session.query(Reservation).filter(
            Reservation.id == reservation_id
        ).first()

        if reservation is None or not self._is_owner(reservation, user):
            raise NotFoundError(
                RESERVATION_NOT_FOUND,
                resource="reservation",
                resource_id=reservation_id
            )

        self.session.delete(reservation)
        self.session.commit()

        log_booking_event(
            "CANCELLED",
            user_id=user.id,
            reservation_id=reservation_id,
            details={
                "restaurant_id": reservation.restaurant_id,
                "date": reservation.date.isoformat(),
                "time": reservation.time.strftime("%H:%M"),
            }
        )

    @staticmethod
    def _is_owner(reservation: Reservation, user: User) -> bool:
        if reservation.user_id is not None:
            return reservation.user_id == user.id
        return reservation.name == user.name

    @staticmethod
    def _owned_by(user: User):
        """SQL form of ``_is_owner``."""
        return or_(
            Reservation.user_id == user.id,
            and_(Reservation.user_id.is_(None), Reservation.name == user.name),
        )

    @handle_errors("list_reservations")
    def list_reservations(self, user: Optional[User] = None) -> List[ReservationDetail]:
        """
        List reservations with their restaurant details.

        Args:
            user: Restrict to reservations owned by this user, including
                  ones booked without a user id under the user's name

        Returns:
            Reservations ordered by date then time, earliest first
        """
        query = self.session.query(Reservation, Restaurant).join(
            Restaurant, Restaurant.id == Reservation.restaurant_id
        )
        if user is not None:
            query = query.filter(self._owned_by(user))

        rows = query.order_by(
            Reservation.date.asc(), Reservation.time.asc(), Reservation.id.asc()
        ).all()

        return [
            ReservationDetail(
                id=reservation.id,
                restaurant_id=reservation.restaurant_id,
                user_id=reservation.user_id,
                name=reservation.name,
                party_size=reservation.party_size,
                date=reservation.date,
                time=reservation.time,
                created_at=reservation.created_at,
                restaurant_name=restaurant.name,
                restaurant_city=restaurant.city,
                restaurant_cuisine=restaurant.cuisine,
                restaurant_address=restaurant.address,
            )
            for reservation, restaurant in rows
        ]
