"""
movie_discovery/durations.py

Parser de duraciones ISO-8601 (formato de `contentDetails.duration` en YouTube).

Ejemplos: "PT2H15M" -> 135, "PT45M" -> 45, "PT1H2M59S" -> 62, "P1DT2H" -> 1560.
Entradas mal formadas devuelven 0: nunca lanza excepción.
"""

from __future__ import annotations

import math
import re
from typing import Final

_ISO_DURATION_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    ^P
    (?:(?P<days>\d+)D)?
    (?:T
        (?:(?P<hours>\d+)H)?
        (?:(?P<minutes>\d+)M)?
        (?:(?P<seconds>\d+(?:\.\d+)?)S)?
    )?
    $
    """,
    re.VERBOSE | re.IGNORECASE,
)


def to_minutes(duration_token: object) -> int:
    """Minutos enteros (floor) de un token ISO-8601; 0 si no se puede parsear."""
    if not isinstance(duration_token, str):
        return 0

    token = duration_token.strip()
    # "P" y "PT" a secas casan con la regex pero no son duraciones válidas.
    if len(token) < 3:
        return 0

    m = _ISO_DURATION_RE.match(token)
    if m is None:
        return 0

    days = int(m.group("days") or 0)
    hours = int(m.group("hours") or 0)
    minutes = int(m.group("minutes") or 0)
    seconds = float(m.group("seconds") or 0.0)

    total = days * 24 * 60 + hours * 60 + minutes + seconds / 60.0
    return max(0, math.floor(total))


__all__ = ["to_minutes"]
