"""
Restaurant reviews: one per (user, restaurant), editable and deletable by
their author only.
"""
from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from models.database import Restaurant, Review
from models.schemas import ReviewResponse
from error_handling.exceptions import ValidationError, NotFoundError, DuplicateEntryError
from error_handling.error_messages import (
    INVALID_RATING,
    RESTAURANT_NOT_FOUND,
    REVIEW_NOT_FOUND,
    ALREADY_REVIEWED,
)
from error_handling.handlers import handle_errors


def validate_rating(rating) -> int:
    """
    Raises:
        ValidationError: Unless the rating is an integer from 1 to 5
    """
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError(INVALID_RATING, field="rating", value=rating)
    return rating


class ReviewService:

    def __init__(self, session: Session):
        self.session = session

    @handle_errors("create_review")
    def create_review(
        self,
        user_id: int,
        restaurant_id: int,
        rating: int,
        review_text: Optional[str] = "",
    ) -> Review:
        """
        Create the user's review of a restaurant.

        Raises:
            ValidationError: If the rating is not 1-5
            NotFoundError: If the restaurant does not exist
            DuplicateEntryError: If the user already reviewed it
        """
        validate_rating(rating)

        if self.session.get(Restaurant, restaurant_id) is None:
            raise NotFoundError(
                RESTAURANT_NOT_FOUND,
                resource="restaurant",
                resource_id=restaurant_id
            )

        existing = self.session.query(Review).filter_by(
            user_id=user_id, restaurant_id=restaurant_id
        ).first()
        if existing is not None:
            raise DuplicateEntryError(ALREADY_REVIEWED, entity="review")

        review = Review(
            user_id=user_id,
            restaurant_id=restaurant_id,
            rating=rating,
            review_text=review_text or "",
        )
        self.session.add(review)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if "uq_review_user_restaurant" in str(e.orig) or "UNIQUE" in str(e.orig):
                raise DuplicateEntryError(ALREADY_REVIEWED, entity="review") from e
            raise

        logger.info(f"Review created id={review.id} user={user_id} restaurant={restaurant_id}")
        return review

    @handle_errors("list_reviews")
    def list_reviews(self, user_id: int) -> List[ReviewResponse]:
        """The user's reviews with restaurant names, newest first."""
        rows = self.session.query(Review, Restaurant.name).join(
            Restaurant, Restaurant.id == Review.restaurant_id
        ).filter(
            Review.user_id == user_id
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()

        return [
            ReviewResponse(
                id=review.id,
                user_id=review.user_id,
                restaurant_id=review.restaurant_id,
                rating=review.rating,
                review_text=review.review_text or "",
                created_at=review.created_at,
                restaurant_name=restaurant_name,
            )
            for review, restaurant_name in rows
        ]

    def _get_owned(self, user_id: int, review_id: int) -> Review:
        review = self.session.query(Review).filter_by(id=review_id, user_id=user_id).first()
        if review is None:
            raise NotFoundError(REVIEW_NOT_FOUND, resource="review", resource_id=review_id)
        return review

    @handle_errors("update_review")
    def update_review(
        self,
        user_id: int,
        review_id: int,
        rating: int,
        review_text: Optional[str] = "",
    ) -> Review:
        """
        Raises:
            ValidationError: If the rating is not 1-5
            NotFoundError: If the review is absent or not the user's
        """
        validate_rating(rating)
        review = self._get_owned(user_id, review_id)
        review.rating = rating
        review.review_text = review_text or ""
        self.session.commit()

        logger.info(f"Review updated id={review.id} user={user_id}")
        return review

    @handle_errors("delete_review")
    def delete_review(self, user_id: int, review_id: int) -> None:
        """
        Raises:
            NotFoundError: If the review is absent or not the user's
        """
        review = self._get_owned(user_id, review_id)
        self.session.delete(review)
        self.session.commit()

        logger.info(f"Review deleted id={review_id} user={user_id}")
