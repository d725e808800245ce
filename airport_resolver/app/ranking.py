from __future__ import annotations

from typing import Iterable

from airport_resolver.app.normalize import normalize_key
from airport_resolver.app.services.amadeus import LocationCandidate


_SUB_TYPE_SCORE = {"CITY": 2, "AIRPORT": 1}


def rank_key(candidate: LocationCandidate, normalized_query: str) -> tuple[int, int, int]:
    """Sort key for location candidates; smaller sorts first.

    Tie-breaks, in order: exact city/name match, non-US country, then
    CITY over AIRPORT over anything else.
    """
    exact = normalized_query in (normalize_key(candidate.city_name), normalize_key(candidate.name))
    # Non-US first, so "Dublin" means Ireland rather than Georgia or Ohio.
    is_us = candidate.country_code == "US"
    specificity = _SUB_TYPE_SCORE.get(candidate.sub_type, 0)
    return (0 if exact else 1, 1 if is_us else 0, -specificity)


def rank_candidates(candidates: Iterable[LocationCandidate], normalized_query: str) -> list[LocationCandidate]:
    return sorted(candidates, key=lambda c: rank_key(c, normalized_query))


def pick_best(candidates: Iterable[LocationCandidate], normalized_query: str) -> LocationCandidate | None:
    ranked = rank_candidates(candidates, normalized_query)
    return ranked[0] if ranked else None
