from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import re
from typing import Any, Literal, Mapping, get_args

from airport_resolver.app.errors import ConfigurationError, ResolveErrorType, worst_error
from airport_resolver.app.normalize import normalize_key
from airport_resolver.app.overrides import lookup_override
from airport_resolver.app.ranking import pick_best
from airport_resolver.app.services.amadeus import AmadeusLocationClient


logger = logging.getLogger(__name__)


Source = Literal["override", "user-code", "provider"]
SOURCES: tuple[str, ...] = get_args(Source)

_IATA_CODE = re.compile(r"[A-Za-z]{3}")


@dataclass(frozen=True)
class ResolvedLocation:
    raw: str
    iata_code: str
    name: str
    city: str | None
    country: str | None
    source: Source

    def to_public_dict(self) -> dict[str, Any]:
        return {
            "raw": self.raw,
            "iataCode": self.iata_code,
            "name": self.name,
            "city": self.city,
            "country": self.country,
            "source": self.source,
        }

    @classmethod
    def from_public_dict(cls, data: Mapping[str, Any]) -> ResolvedLocation:
        source = data.get("source")
        if source not in SOURCES:
            raise ValueError(f"Unknown location source {source!r}")
        return cls(
            raw=str(data.get("raw") or ""),
            iata_code=str(data["iataCode"]),
            name=str(data.get("name") or data["iataCode"]),
            city=data.get("city"),
            country=data.get("country"),
            source=source,
        )


@dataclass(frozen=True)
class ResolveResult:
    result: ResolvedLocation | None = None
    error_type: ResolveErrorType = ResolveErrorType.NONE

    def __post_init__(self) -> None:
        if (self.error_type is ResolveErrorType.NONE) != (self.result is not None):
            raise ValueError("ResolveResult needs a result exactly when error_type is NONE")

    @property
    def ok(self) -> bool:
        return self.error_type is ResolveErrorType.NONE

    @classmethod
    def success(cls, location: ResolvedLocation) -> ResolveResult:
        return cls(result=location)

    @classmethod
    def failure(cls, error_type: ResolveErrorType) -> ResolveResult:
        return cls(error_type=error_type)


@dataclass(frozen=True)
class ResolvedBatch:
    results: dict[str, ResolveResult] = field(default_factory=dict)

    @property
    def error_type(self) -> ResolveErrorType:
        return worst_error(r.error_type for r in self.results.values())

    def location(self, name: str) -> ResolvedLocation | None:
        outcome = self.results.get(name)
        return outcome.result if outcome else None

    def failed_fields(self) -> dict[str, str]:
        return {name: r.error_type.value for name, r in self.results.items() if not r.ok}


class LocationResolver:
    """Turns user-typed place names into IATA city/airport codes.

    ``resolve`` never raises: every failure comes back as a ``ResolveResult``
    with a non-NONE ``error_type``.
    """

    def __init__(self, *, locations: AmadeusLocationClient | None = None) -> None:
        self.locations = locations

    def resolve(self, raw: str | None) -> ResolveResult:
        try:
            return self._resolve(raw)
        except ConfigurationError as e:
            logger.error("Location search is not configured", extra={"query": raw, "error": str(e)})
            return ResolveResult.failure(ResolveErrorType.INTERNAL_ERROR)
        except Exception:
            logger.exception("Unexpected error resolving location", extra={"query": raw})
            return ResolveResult.failure(ResolveErrorType.INTERNAL_ERROR)

    async def resolve_many(self, queries: Mapping[str, str | None]) -> ResolvedBatch:
        """Resolve several named queries concurrently and wait for all of them.

        A later, more severe failure must still be seen, so nothing fails fast;
        the aggregate is read from ``ResolvedBatch.error_type``.
        """
        names = list(queries)
        settled = await asyncio.gather(
            *(asyncio.to_thread(self.resolve, queries[name]) for name in names),
            return_exceptions=True,
        )

        results: dict[str, ResolveResult] = {}
        for name, outcome in zip(names, settled):
            if isinstance(outcome, ResolveResult):
                results[name] = outcome
            else:
                logger.error("Resolution task failed", extra={"field": name, "error": repr(outcome)})
                results[name] = ResolveResult.failure(ResolveErrorType.INTERNAL_ERROR)
        return ResolvedBatch(results=results)

    def _resolve(self, raw: str | None) -> ResolveResult:
        query = str(raw or "").strip()
        if not query:
            return ResolveResult.failure(ResolveErrorType.NOT_FOUND)

        key = normalize_key(query)

        override = lookup_override(key)
        if override:
            logger.debug("Resolved from overrides", extra={"query": query, "iata_code": override.iata_code})
            return ResolveResult.success(
                ResolvedLocation(
                    raw=query,
                    iata_code=override.iata_code,
                    name=override.name,
                    city=override.city,
                    country=override.country,
                    source="override",
                )
            )

        if _IATA_CODE.fullmatch(query):
            code = query.upper()
            return ResolveResult.success(
                ResolvedLocation(raw=query, iata_code=code, name=code, city=None, country=None, source="user-code")
            )

        if self.locations is None:
            raise ConfigurationError("No location search client configured")

        search = self.locations.find_locations(query)
        if not search.ok:
            return ResolveResult.failure(search.error_type)

        best = pick_best(search.locations, key)
        if best is None:
            return ResolveResult.failure(ResolveErrorType.NOT_FOUND)

        return ResolveResult.success(
            ResolvedLocation(
                raw=query,
                iata_code=best.iata_code,
                name=best.name,
                city=best.city_name,
                country=best.country_code,
                source="provider",
            )
        )
