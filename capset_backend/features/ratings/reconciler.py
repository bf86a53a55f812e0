"""
Rating lookup that tolerates inconsistently stored keys.

Rating records accumulate over the life of a project: the root folder may have
moved, keys may use either slash direction or a different case, and some were
stored as absolute paths. Lookup walks `RATING_MATCHERS` in order and stops at
the first hit; a miss on every tier means the image is unrated.

Each matcher is a pure function ``(ratings, lookup) -> value | None`` so tiers
can be added or tested on their own.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ...path_utils import normalize_key_for_lookup, normalize_rel
from ...shared import RatingLabel

RatingMap = Mapping[str, str]


@dataclass(frozen=True)
class RatingLookup:
    """One image's lookup keys, computed once per image."""
    rel_key: str
    raw_rel: str
    want: str
    root_norm: str

    @classmethod
    def build(cls, rel_key: str, raw_rel: str, project_root: str) -> "RatingLookup":
        return cls(
            rel_key=rel_key,
            raw_rel=raw_rel,
            want=normalize_key_for_lookup(rel_key),
            root_norm=normalize_key_for_lookup(project_root),
        )


Matcher = Callable[[RatingMap, RatingLookup], "str | None"]


def match_exact(ratings: RatingMap, lookup: RatingLookup) -> str | None:
    return ratings.get(lookup.rel_key)


def match_raw(ratings: RatingMap, lookup: RatingLookup) -> str | None:
    # Records written before keys were normalized.
    if lookup.raw_rel == lookup.rel_key:
        return None
    return ratings.get(lookup.raw_rel)


def match_case_insensitive(ratings: RatingMap, lookup: RatingLookup) -> str | None:
    for key, value in ratings.items():
        if normalize_key_for_lookup(key) == lookup.want:
            return value
    return None


def _strip_root(key_norm: str, root_norm: str) -> str | None:
    if not root_norm or len(key_norm) <= len(root_norm):
        return None
    for prefix in (root_norm, root_norm.replace("\\", "/")):
        if key_norm.startswith(prefix):
            return key_norm[len(prefix):].lstrip("/\\")
    return None


def match_root_stripped(ratings: RatingMap, lookup: RatingLookup) -> str | None:
    # Keys stored as absolute paths under the project root.
    for key, value in ratings.items():
        remainder = _strip_root(normalize_key_for_lookup(key), lookup.root_norm)
        if remainder and normalize_key_for_lookup(remainder) == lookup.want:
            return value
    return None


RATING_MATCHERS: tuple[Matcher, ...] = (
    match_exact,
    match_raw,
    match_case_insensitive,
    match_root_stripped,
)


def resolve_rating(
    ratings: RatingMap,
    rel_key: str,
    raw_rel: str,
    project_root: str,
    matchers: tuple[Matcher, ...] = RATING_MATCHERS,
) -> RatingLabel:
    """
    Resolve the rating of one image.

    Args:
        ratings: Stored mapping of path-like keys to rating labels
        rel_key: Normalized relative path of the image
        raw_rel: Relative path before normalization
        project_root: Canonical dataset root (used to strip absolute keys)

    Returns:
        The first matching label, or RatingLabel.NONE
    """
    if not ratings:
        return RatingLabel.NONE
    lookup = RatingLookup.build(normalize_rel(rel_key) or rel_key, raw_rel, project_root)
    for matcher in matchers:
        value = matcher(ratings, lookup)
        if value is not None:
            return RatingLabel.parse(value)
    return RatingLabel.NONE
