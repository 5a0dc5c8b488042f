"""
Cuisine-affinity recommendations.

A user's favorites, well-rated reviews and stated preferred cuisine are
turned into a score per restaurant; the best restaurant of each of the
top-scoring cuisines is recommended. Restaurants the user already
favorited or reviewed are never recommended.
"""
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger
from sqlalchemy.orm import Session

from models.database import Favorite, Restaurant, Review, User
from error_handling.handlers import handle_errors

PREFERRED_CUISINE_POINTS = 3
FAVORITE_CUISINE_POINTS = 2
HIGH_RATED_CUISINE_POINTS = 2
HIGH_RATING = 4

TIE_BREAK_STABLE = "stable"
TIE_BREAK_RANDOM = "random"


@dataclass
class ScoredRestaurant:
    restaurant: Restaurant
    score: int


def score_restaurant(
    restaurant: Restaurant,
    preferred_cuisine: Optional[str],
    favorite_cuisines: set,
    high_rated_cuisines: set,
) -> int:
    """Affinity score of one restaurant for a user."""
    score = 0
    if preferred_cuisine and restaurant.cuisine == preferred_cuisine:
        score += PREFERRED_CUISINE_POINTS
    if restaurant.cuisine in favorite_cuisines:
        score += FAVORITE_CUISINE_POINTS
    if restaurant.cuisine in high_rated_cuisines:
        score += HIGH_RATED_CUISINE_POINTS
    return score


def _order_group(
    group: List[ScoredRestaurant],
    tie_break: str,
    rng: Optional[random.Random],
) -> List[ScoredRestaurant]:
    if tie_break == TIE_BREAK_RANDOM:
        shuffled = list(group)
        (rng or random).shuffle(shuffled)
        # sorted() is stable, so equal scores keep their shuffled order
        return sorted(shuffled, key=lambda item: -item.score)
    if tie_break != TIE_BREAK_STABLE:
        raise ValueError(f"Unknown tie-break policy: {tie_break}")
    return sorted(
        group,
        key=lambda item: (-item.score, (item.restaurant.name or "").lower(), item.restaurant.id),
    )


def recommend(
    user: User,
    favorites: Iterable[Restaurant],
    reviews: Iterable[Review],
    catalog: Sequence[Restaurant],
    tie_break: str = TIE_BREAK_STABLE,
    limit: int = 3,
    rng: Optional[random.Random] = None,
) -> List[ScoredRestaurant]:
    """
    Pick up to ``limit`` restaurants, at most one per cuisine.

    Args:
        user: User the recommendations are for
        favorites: Restaurants the user favorited
        reviews: The user's reviews
        catalog: Every restaurant
        tie_break: "stable" orders a cuisine group by score, name, id;
                   "random" shuffles it before picking the best score
        limit: Maximum number of recommendations
        rng: Random source for the "random" policy

    Returns:
        Scored restaurants, best cuisine first
    """
    favorites = list(favorites)
    reviews = list(reviews)
    cuisine_by_id = {restaurant.id: restaurant.cuisine for restaurant in catalog}

    favorite_ids = {restaurant.id for restaurant in favorites}
    reviewed_ids = {review.restaurant_id for review in reviews}

    favorite_cuisines = {restaurant.cuisine for restaurant in favorites}
    high_rated_cuisines = {
        cuisine_by_id.get(review.restaurant_id)
        for review in reviews
        if review.rating is not None and review.rating >= HIGH_RATING
    }
    high_rated_cuisines.discard(None)

    groups: Dict[str, List[ScoredRestaurant]] = {}
    for restaurant in catalog:
        if restaurant.id in favorite_ids or restaurant.id in reviewed_ids:
            continue
        score = score_restaurant(
            restaurant,
            user.preferred_cuisine,
            favorite_cuisines,
            high_rated_cuisines,
        )
        if score > 0:
            groups.setdefault(restaurant.cuisine, []).append(ScoredRestaurant(restaurant, score))

    representatives = [
        _order_group(group, tie_break, rng)[0] for group in groups.values()
    ]
    representatives.sort(key=lambda item: (-item.score, item.restaurant.cuisine))

    return representatives[:limit]


class RecommendationService:
    """Loads a user's history from the store and scores the catalog."""

    def __init__(
        self,
        session: Session,
        tie_break: str = TIE_BREAK_STABLE,
        limit: int = 3,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.tie_break = tie_break
        self.limit = limit
        self.rng = rng

    @handle_errors("recommendations")
    def for_user(self, user: User) -> List[ScoredRestaurant]:
        favorites = self.session.query(Restaurant).join(
            Favorite, Favorite.restaurant_id == Restaurant.id
        ).filter(Favorite.user_id == user.id).all()

        reviews = self.session.query(Review).filter(Review.user_id == user.id).all()
        catalog = self.session.query(Restaurant).order_by(Restaurant.id).all()

        picks = recommend(
            user,
            favorites,
            reviews,
            catalog,
            tie_break=self.tie_break,
            limit=self.limit,
            rng=self.rng,
        )
        logger.debug(
            f"Recommendations for user={user.id}: "
            f"{[(pick.restaurant.id, pick.score) for pick in picks]}"
        )
        return picks
