import math
import re
from typing import Optional


# -------------------------------------------------
# ROUNDING
# -------------------------------------------------
def round_half_up(value: float) -> int:
    """
    Rounds to the nearest integer, halves away from zero for positive values.
    Python's round() uses banker's rounding (round(32.5) == 32).
    """
    return int(math.floor(value + 0.5))


# -------------------------------------------------
# TEXT → NUMBER PARSERS
# -------------------------------------------------
def parse_number(value: str) -> int:
    """
    Parses: 50k, 12k, 1.2m, 10000, 500,000
    """
    value = value.strip().replace(",", "").lower()
    scale = 1
    if value.endswith("k"):
        value, scale = value[:-1], 1_000
    elif value.endswith("m"):
        value, scale = value[:-1], 1_000_000

    number = float(value) * scale
    if not math.isfinite(number):
        raise ValueError("Number must be finite")
    return int(number)


def parse_engagement(er_raw: str) -> float:
    """
    Converts engagement into a decimal rate (0 <= x <= 1)
    Handles:
        - 0.08  => 0.08
        - 8%    => 0.08
        - 8     => 0.08
        - 0.8%  => 0.008
    """
    er_str = er_raw.strip().replace("%", "")

    try:
        er = float(er_str)
    except ValueError:
        raise ValueError("Invalid engagement")

    if "%" in er_raw or er > 1:
        er = er / 100.0

    if not (0 <= er <= 1):
        raise ValueError("Engagement must be between 0 and 1")

    return er


_LEADING_INT = re.compile(r"^\s*(\d+)")


def leading_int(label: str) -> Optional[int]:
    """
    Integer prefix of a bucket label: "35-44" -> 35, "55+" -> 55, "unknown" -> None.
    """
    match = _LEADING_INT.match(label)
    if not match:
        return None
    return int(match.group(1))
