"""
Tests for cuisine-affinity recommendations.

Tests cover:
- Per-restaurant scoring
- Exclusion of favorited and reviewed restaurants
- One pick per cuisine, at most three picks
- Stable and seeded-random tie-breaking
- Loading history through RecommendationService
"""
import random

import pytest
from sqlalchemy.orm import Session

from models.database import Favorite, Restaurant, Review, User
from services.recommendation_service import (
    RecommendationService,
    recommend,
    score_restaurant,
)


def restaurant(rid: int, name: str, cuisine: str) -> Restaurant:
    return Restaurant(
        id=rid, name=name, city="Baltimore", cuisine=cuisine,
        price="$$", address=f"{rid} Test St", tables=4,
    )


CATALOG = [
    restaurant(1, "Bella Notte", "Italian"),
    restaurant(2, "Amalfi", "Italian"),
    restaurant(3, "Capri", "Italian"),
    restaurant(4, "Harbor Grill", "Seafood"),
    restaurant(5, "Crab Shack", "Seafood"),
    restaurant(6, "Sushi Ko", "Japanese"),
    restaurant(7, "Taco Town", "Mexican"),
    restaurant(8, "Pho House", "Vietnamese"),
    restaurant(9, "Le Petit", "French"),
    restaurant(10, "Ramen Bar", "Japanese"),
    restaurant(11, "Burrito Barn", "Mexican"),
]
BY_ID = {r.id: r for r in CATALOG}


def review(restaurant_id: int, rating: int) -> Review:
    return Review(restaurant_id=restaurant_id, rating=rating, review_text="")


class TestScoreRestaurant:

    def test_preferred_cuisine(self):
        assert score_restaurant(BY_ID[1], "Italian", set(), set()) == 3

    def test_all_signals_add_up(self):
        assert score_restaurant(BY_ID[1], "Italian", {"Italian"}, {"Italian"}) == 7

    def test_favorite_and_high_rated(self):
        assert score_restaurant(BY_ID[4], None, {"Seafood"}, set()) == 2
        assert score_restaurant(BY_ID[4], "", set(), {"Seafood"}) == 2

    def test_no_affinity(self):
        assert score_restaurant(BY_ID[9], "Italian", {"Seafood"}, {"Japanese"}) == 0


class TestRecommend:

    def test_new_user_without_history_gets_nothing(self):
        user = User(name="Nobody", preferred_cuisine=None)
        assert recommend(user, [], [], CATALOG) == []

    def test_preferred_cuisine_only(self):
        user = User(name="Avery", preferred_cuisine="Italian")

        picks = recommend(user, [], [], CATALOG)

        assert len(picks) == 1
        assert picks[0].restaurant.name == "Amalfi"
        assert picks[0].score == 3

    def test_excludes_favorited_and_reviewed(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        favorites = [BY_ID[2], BY_ID[4]]
        reviews = [review(1, 5), review(6, 2)]

        picks = recommend(user, favorites, reviews, CATALOG)
        picked_ids = {pick.restaurant.id for pick in picks}

        assert picked_ids.isdisjoint({1, 2, 4, 6})
        assert [pick.restaurant.name for pick in picks] == ["Capri", "Crab Shack"]

    def test_one_restaurant_per_cuisine(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        picks = recommend(user, [BY_ID[5]], [review(7, 4)], CATALOG)

        cuisines = [pick.restaurant.cuisine for pick in picks]
        assert len(cuisines) == len(set(cuisines))

    def test_ranked_by_score_and_limited_to_three(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        favorites = [BY_ID[1], BY_ID[4]]
        reviews = [review(6, 4), review(7, 5), review(8, 3)]

        picks = recommend(user, favorites, reviews, CATALOG)

        # Italian scores 3 + 2; Japanese, Mexican and Seafood tie at 2 and rank by cuisine name
        assert [(p.restaurant.name, p.score) for p in picks] == [
            ("Amalfi", 5),
            ("Ramen Bar", 2),
            ("Burrito Barn", 2),
        ]

    def test_low_ratings_do_not_count(self):
        user = User(name="Sam", preferred_cuisine=None)
        picks = recommend(user, [], [review(6, 3)], CATALOG)
        assert picks == []

    def test_high_rating_boosts_other_restaurants_of_cuisine(self):
        user = User(name="Sam", preferred_cuisine=None)
        picks = recommend(user, [], [review(4, 4)], CATALOG)

        assert [pick.restaurant.name for pick in picks] == ["Crab Shack"]
        assert picks[0].score == 2

    def test_limit_is_configurable(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        picks = recommend(user, [BY_ID[4]], [review(6, 5)], CATALOG, limit=1)
        assert len(picks) == 1
        assert picks[0].restaurant.cuisine == "Italian"

    def test_stable_tie_break_is_deterministic(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        first = recommend(user, [BY_ID[4]], [], CATALOG)
        for _ in range(5):
            again = recommend(user, [BY_ID[4]], [], CATALOG)
            assert [p.restaurant.id for p in again] == [p.restaurant.id for p in first]

    def test_random_tie_break_with_seed(self):
        user = User(name="Avery", preferred_cuisine="Italian")

        picks_a = recommend(user, [], [], CATALOG, tie_break="random", rng=random.Random(42))
        picks_b = recommend(user, [], [], CATALOG, tie_break="random", rng=random.Random(42))

        assert [p.restaurant.id for p in picks_a] == [p.restaurant.id for p in picks_b]
        assert picks_a[0].restaurant.cuisine == "Italian"
        assert picks_a[0].restaurant.id in {1, 2, 3}

    def test_random_tie_break_varies_representative(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        seen = {
            recommend(user, [], [], CATALOG, tie_break="random", rng=random.Random(seed))[0].restaurant.id
            for seed in range(50)
        }
        assert len(seen) > 1

    def test_unknown_tie_break(self):
        user = User(name="Avery", preferred_cuisine="Italian")
        with pytest.raises(ValueError):
            recommend(user, [], [], CATALOG, tie_break="alphabetical")


class TestRecommendationService:

    def test_uses_stored_history(self, db_session: Session, restaurants, user: User):
        # Avery prefers Italian and has favorited Harbor Grill
        db_session.add(Favorite(user_id=user.id, restaurant_id=restaurants["Harbor Grill"].id))
        db_session.add(Review(
            user_id=user.id,
            restaurant_id=restaurants["Taco Town"].id,
            rating=5,
            review_text="Great",
        ))
        db_session.commit()

        picks = RecommendationService(db_session).for_user(user)

        names = [pick.restaurant.name for pick in picks]
        assert names == ["Pasta Bar", "Crab Shack"]
        assert [pick.score for pick in picks] == [3, 2]

    def test_user_without_signals(self, db_session: Session, restaurants, other_user: User):
        assert RecommendationService(db_session).for_user(other_user) == []
