"""Lenient numeric parsing shared by submission validation and analysis."""

from __future__ import annotations

import math
from typing import Any


def to_finite_float(value: Any) -> float | None:
    """Return *value* as a finite float, or None if it can't be read as one.

    Accepts ints, floats and numeric strings (surrounding whitespace is
    ignored).  Booleans, NaN and infinities are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
