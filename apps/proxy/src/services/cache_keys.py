from __future__ import annotations

import hashlib
from typing import Optional

from services.location import ResolvedLocation, Units

OPERATIONS = ("current", "forecast")
KEY_PREFIX = "weather"
_DELIMITER = "|"


def build_cache_key(
    operation: str,
    location: ResolvedLocation,
    units: Units | str,
    days: Optional[int] = None,
) -> str:
    """Return ``weather:<operation>:<md5>`` for a logical weather query.

    Only ``None``/empty components are dropped before hashing, so ``days=0``
    still produces a key distinct from an omitted day count.
    """
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown cache operation '{operation}'")
    units_value = units.value if isinstance(units, Units) else units
    parts = [location.canonical(), units_value]
    if operation == "forecast":
        parts.append(None if days is None else str(days))
    payload = _DELIMITER.join(str(part) for part in parts if part is not None and part != "")
    digest = hashlib.md5(payload.encode("utf-8"), usedforsecurity=False).hexdigest()
    return f"{KEY_PREFIX}:{operation}:{digest}"


__all__ = ["build_cache_key", "OPERATIONS"]
