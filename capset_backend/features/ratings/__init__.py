"""Per-image quality ratings and tolerant key reconciliation."""
from .reconciler import RATING_MATCHERS, RatingLookup, resolve_rating
from .store import get_rating, load_ratings, ratings_path, set_rating

__all__ = [
    "RATING_MATCHERS",
    "RatingLookup",
    "get_rating",
    "load_ratings",
    "ratings_path",
    "resolve_rating",
    "set_rating",
]
