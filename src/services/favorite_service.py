"""
Favorite restaurants per user.
"""
from typing import List

from loguru import logger
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from models.database import Favorite, Restaurant
from error_handling.exceptions import NotFoundError, DuplicateEntryError
from error_handling.error_messages import RESTAURANT_NOT_FOUND, ALREADY_FAVORITED
from error_handling.handlers import handle_errors


class FavoriteService:

    def __init__(self, session: Session):
        self.session = session

    @handle_errors("list_favorites")
    def list_favorites(self, user_id: int) -> List[Restaurant]:
        """Favorited restaurants, most recently added first."""
        return self.session.query(Restaurant).join(
            Favorite, Favorite.restaurant_id == Restaurant.id
        ).filter(
            Favorite.user_id == user_id
        ).order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()

    @handle_errors("add_favorite")
    def add_favorite(self, user_id: int, restaurant_id: int) -> Favorite:
        """
        Add a restaurant to the user's favorites.

        Raises:
            NotFoundError: If the restaurant does not exist
            DuplicateEntryError: If it is already a favorite
        """
        if self.session.get(Restaurant, restaurant_id) is None:
            raise NotFoundError(
                RESTAURANT_NOT_FOUND,
                resource="restaurant",
                resource_id=restaurant_id
            )

        existing = self.session.query(Favorite).filter_by(
            user_id=user_id, restaurant_id=restaurant_id
        ).first()
        if existing is not None:
            raise DuplicateEntryError(ALREADY_FAVORITED, entity="favorite")

        favorite = Favorite(user_id=user_id, restaurant_id=restaurant_id)
        self.session.add(favorite)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if "uq_favorite_user_restaurant" in str(e.orig) or "UNIQUE" in str(e.orig):
                raise DuplicateEntryError(ALREADY_FAVORITED, entity="favorite") from e
            raise

        logger.info(f"Favorite added user={user_id} restaurant={restaurant_id}")
        return favorite

    @handle_errors("remove_favorite")
    def remove_favorite(self, user_id: int, restaurant_id: int) -> None:
        """Remove a favorite. Removing a missing favorite is a no-op."""
        deleted = self.session.query(Favorite).filter_by(
            user_id=user_id, restaurant_id=restaurant_id
        ).delete(synchronize_session=False)
        self.session.commit()

        if deleted:
            logger.info(f"Favorite removed user={user_id} restaurant={restaurant_id}")
