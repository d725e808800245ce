from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OverrideRecord:
    iata_code: str
    name: str
    city: str
    country: str


_DUBLIN = OverrideRecord(iata_code="DUB", name="Dublin", city="Dublin", country="IE")
_LISBON = OverrideRecord(iata_code="LIS", name="Lisbon", city="Lisbon", country="PT")
_LAS_PALMAS = OverrideRecord(iata_code="LPA", name="Las Palmas de Gran Canaria", city="Las Palmas", country="ES")
# City code covering both TFN and TFS.
_TENERIFE = OverrideRecord(iata_code="TCI", name="Tenerife", city="Tenerife", country="ES")
_BARCELONA = OverrideRecord(iata_code="BCN", name="Barcelona", city="Barcelona", country="ES")
_MADRID = OverrideRecord(iata_code="MAD", name="Madrid", city="Madrid", country="ES")
_PARIS = OverrideRecord(iata_code="PAR", name="Paris", city="Paris", country="FR")  # CDG + ORY
_ROME = OverrideRecord(iata_code="ROM", name="Rome", city="Rome", country="IT")  # FCO + CIA
_LONDON = OverrideRecord(iata_code="LON", name="London", city="London", country="GB")  # LHR, LGW, STN, LTN, LCY, SEN
_NEW_YORK = OverrideRecord(iata_code="NYC", name="New York", city="New York", country="US")  # JFK, EWR, LGA


# Names the provider search handles poorly or ambiguously. Keys must already be
# in normalize_key() form (lower-case, no accents, trimmed).
_LOCATION_OVERRIDES: dict[str, OverrideRecord] = {
    # Ireland
    "dublin": _DUBLIN,
    "dublin, ireland": _DUBLIN,
    # Portugal
    "lisbon": _LISBON,
    "lisbon, portugal": _LISBON,
    "lisboa": _LISBON,
    "lisboa, portugal": _LISBON,
    # Canary Islands
    "las palmas": _LAS_PALMAS,
    "las palmas, gran canaria": _LAS_PALMAS,
    "gran canaria": _LAS_PALMAS,
    "las palmas de gran canaria": _LAS_PALMAS,
    "tenerife": _TENERIFE,
    "tenerife, spain": _TENERIFE,
    "tenerife north": OverrideRecord(iata_code="TFN", name="Tenerife Norte", city="Tenerife", country="ES"),
    "tenerife south": OverrideRecord(iata_code="TFS", name="Tenerife Sur", city="Tenerife", country="ES"),
    # Mainland Spain
    "barcelona": _BARCELONA,
    "barcelona, spain": _BARCELONA,
    "madrid": _MADRID,
    "madrid, spain": _MADRID,
    # France / Italy city codes
    "paris": _PARIS,
    "paris, france": _PARIS,
    "rome": _ROME,
    "rome, italy": _ROME,
    # Multi-airport metro areas
    "london": _LONDON,
    "london, uk": _LONDON,
    "new york": _NEW_YORK,
    "new york city": _NEW_YORK,
    "nyc": _NEW_YORK,
    # Brazil
    "sao paulo": OverrideRecord(iata_code="SAO", name="São Paulo", city="São Paulo", country="BR"),  # GRU + CGH + VCP
    "rio de janeiro": OverrideRecord(iata_code="RIO", name="Rio de Janeiro", city="Rio de Janeiro", country="BR"),  # GIG + SDU
}


def lookup_override(key: str) -> OverrideRecord | None:
    return _LOCATION_OVERRIDES.get(key)


def override_keys() -> list[str]:
    return list(_LOCATION_OVERRIDES)
