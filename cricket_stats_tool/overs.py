"""Overs are written as ``whole.balls``: 4.3 is four overs and three balls.

Totals are always accumulated in legal balls and converted back once, so
``0.5 + 0.5`` overs is ten balls (``1.4``) and never the decimal ``1.0``.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Iterable, Union

BALLS_PER_OVER = 6

OversValue = Union[str, int, float, Decimal]

_OVERS_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?$")

logger = logging.getLogger(__name__)


def _as_text(value: OversValue) -> str:
    if isinstance(value, bool):
        raise ValueError(f"Invalid overs value '{value}'")
    if isinstance(value, float):
        # repr gives the shortest round-tripping text, 4.3 -> "4.3"
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value).strip()


def _split(text: str) -> tuple[str, str]:
    whole, _, fraction = text.partition(".")
    return whole, fraction.rstrip("0")


def validate_overs(value: OversValue) -> str:
    """Return canonical ``"<whole>.<balls>"`` text or raise ``ValueError``."""
    text = _as_text(value)
    match = _OVERS_PATTERN.match(text)
    if not match:
        raise ValueError(f"Invalid overs format '{value}' (e.g. 4 or 4.2)")

    whole, fraction = _split(text)
    if fraction == "":
        balls = 0
    elif len(fraction) == 1 and int(fraction) < BALLS_PER_OVER:
        balls = int(fraction)
    else:
        raise ValueError(
            f"Invalid overs value '{value}': balls within an over must be 0-5"
        )
    return f"{int(whole)}.{balls}"


def overs_to_balls(value: OversValue | None) -> int:
    """Convert one overs value to legal balls, degrading bad parts to zero."""
    if value is None:
        return 0
    try:
        text = _as_text(value)
    except ValueError:
        logger.warning("Ignoring malformed overs value %r", value)
        return 0
    if text == "":
        return 0

    whole_text, fraction = _split(text)
    if whole_text.isdigit():
        whole = int(whole_text)
    else:
        logger.warning("Malformed overs value %r: counting whole overs as 0", value)
        whole = 0

    if fraction == "":
        balls = 0
    elif fraction.isdigit() and len(fraction) == 1 and int(fraction) < BALLS_PER_OVER:
        balls = int(fraction)
    else:
        logger.warning("Malformed overs value %r: counting extra balls as 0", value)
        balls = 0

    return whole * BALLS_PER_OVER + balls


def total_balls(values: Iterable[OversValue | None]) -> int:
    return sum(overs_to_balls(v) for v in values)


def balls_to_overs(balls: int) -> Decimal:
    whole, rest = divmod(int(balls), BALLS_PER_OVER)
    return Decimal(whole) + Decimal(rest) / Decimal(10)


def format_overs(balls: int) -> str:
    return f"{balls_to_overs(balls):.1f}"
