# backend/socioprice/services/multipliers.py

import re
from typing import Dict, Mapping, Tuple


# ---------------------------------------------
# INDUSTRY MULTIPLIERS: audience spending strength
# keys are lowercase, lookups are case-insensitive
# ---------------------------------------------
INDUSTRY_MULT = {
    "technology":   1.2,
    "finance":      1.3,
    "healthcare":   1.15,
    "consulting":   1.25,
    "legal":        1.25,
    "energy":       1.15,
    "business":     1.1,
    "marketing":    1.05,
    "education":    0.9,
    "retail":       0.85,
    "hospitality":  0.85,
    "non-profit":   0.8,
}
DEFAULT_INDUSTRY_MULT = 1.0

# ---------------------------------------------
# REGION PURCHASING POWER (United States = 1.0)
# unknown regions sit below baseline
# ---------------------------------------------
REGION_MULT = {
    "united states":   1.0,
    "canada":          0.95,
    "united kingdom":  0.9,
    "singapore":       0.9,
    "australia":       0.85,
    "european union":  0.85,
    "japan":           0.8,
    "south korea":     0.75,
    "china":           0.6,
    "southeast asia":  0.6,
    "south america":   0.6,
    "brazil":          0.55,
    "india":           0.5,
}
DEFAULT_REGION_MULT = 0.7

# ---------------------------------------------
# SENIORITY → INCOME MULTIPLIER
# ---------------------------------------------
SENIORITY_MULT = {
    "Entry":      0.7,
    "Junior":     0.9,
    "Mid-level":  1.0,
    "Senior":     1.3,
    "Manager":    1.5,
    "Director":   1.8,
    "Executive":  2.5,
    "C-level":    3.0,
}
DEFAULT_SENIORITY = "Mid-level"

# ---------------------------------------------
# INDUSTRY INCOME BRACKETS (USD / year)
# ---------------------------------------------
INDUSTRY_INCOME_USD: Dict[str, Tuple[int, int]] = {
    "technology":       (80_000, 150_000),
    "finance":          (90_000, 180_000),
    "healthcare":       (75_000, 140_000),
    "education":        (50_000, 90_000),
    "marketing":        (60_000, 120_000),
    "sales":            (65_000, 130_000),
    "consulting":       (85_000, 160_000),
    "legal":            (90_000, 170_000),
    "manufacturing":    (60_000, 110_000),
    "real estate":      (70_000, 140_000),
    "retail":           (45_000, 85_000),
    "media":            (55_000, 110_000),
    "hospitality":      (40_000, 80_000),
    "government":       (60_000, 110_000),
    "non-profit":       (45_000, 85_000),
    "energy":           (75_000, 140_000),
}
DEFAULT_INCOME_USD = (50_000, 100_000)

# title keyword → seniority, checked top to bottom
_SENIORITY_KEYWORDS = (
    ("C-level",   ("ceo", "cto", "cfo", "coo", "chief")),
    ("Executive", ("vp", "vice president", "president")),
    ("Director",  ("director", "head of")),
    ("Manager",   ("manager", "lead")),
    ("Senior",    ("senior", "sr")),
    ("Junior",    ("junior", "jr", "associate")),
    ("Entry",     ("intern", "trainee")),
)


def industry_multiplier(industry: str) -> float:
    return INDUSTRY_MULT.get((industry or "").strip().lower(), DEFAULT_INDUSTRY_MULT)


def region_multiplier(region: str) -> float:
    return REGION_MULT.get((region or "").strip().lower(), DEFAULT_REGION_MULT)


def seniority_multiplier(seniority: str) -> float:
    """Case-insensitive; unknown labels count as Mid-level."""
    wanted = (seniority or "").strip().lower()
    for label, mult in SENIORITY_MULT.items():
        if label.lower() == wanted:
            return mult
    return SENIORITY_MULT[DEFAULT_SENIORITY]


def determine_seniority(position: str) -> str:
    """
    Infers a seniority label from a job title.
    """
    title = (position or "").lower()
    for label, keywords in _SENIORITY_KEYWORDS:
        if any(re.search(rf"\b{re.escape(keyword)}\b", title) for keyword in keywords):
            return label
    return DEFAULT_SENIORITY


def estimate_income_range(industry: str, seniority: str) -> Tuple[int, int]:
    low, high = INDUSTRY_INCOME_USD.get((industry or "").strip().lower(), DEFAULT_INCOME_USD)
    mult = seniority_multiplier(seniority)
    return round(low * mult), round(high * mult)


def weighted_multiplier(distribution: Mapping[str, float], lookup) -> float:
    """
    Sum of lookup(label) * weight over a distribution; neutral 1.0 when empty.
    """
    if not distribution:
        return 1.0
    return sum(lookup(label) * weight for label, weight in distribution.items())
