from __future__ import annotations

import uuid


def parse_id(raw: str | None) -> str | None:
    """
    Canonical form of a store identifier, or None if ``raw`` could never
    name a stored record. Callers treat None exactly like "not found".
    """
    if not raw:
        return None
    try:
        return str(uuid.UUID(str(raw).strip()))
    except ValueError:
        return None
