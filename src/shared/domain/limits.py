"""Numeric bounds of the integer columns.

Values outside these bounds cannot be stored, so inputs are checked against
them before they reach the database.
"""

from __future__ import annotations

from typing import Any, Optional

# PositiveIntegerField: quantities, distances, livestock counts and prices.
POSITIVE_INT_MAX = 2_147_483_647

# PositiveBigIntegerField: order and profile ids.
POSITIVE_BIGINT_MAX = 9_223_372_036_854_775_807


def parse_id(value: Any) -> Optional[int]:
    """Return *value* as an entity id, or ``None`` if it cannot be one.

    Accepts a non-bool ``int`` or a string of ASCII digits (URL path
    values) within ``0..POSITIVE_BIGINT_MAX``.  Floats are never truncated.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    if not 0 <= value <= POSITIVE_BIGINT_MAX:
        return None
    return value
