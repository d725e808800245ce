from __future__ import annotations

import unicodedata


def normalize_key(raw: str | None) -> str:
    """Fold a user-typed place name into a comparison key.

    "  São Paulo " and "sao paulo" both become "sao paulo". Applying it twice
    gives the same result as applying it once.
    """
    if not raw:
        return ""
    # Lower-case first: some capitals ("İ") lower-case into a combining mark.
    decomposed = unicodedata.normalize("NFD", str(raw).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()
