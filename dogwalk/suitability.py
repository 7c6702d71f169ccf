# ABOUTME: Pure scoring of weather parameters into a 0-100 dog walk suitability index.
# ABOUTME: Applies an ordered list of penalty rules and maps the final score to a badge.

import math
from collections.abc import Callable

from dogwalk.models import Badge, SuitabilityInputs, SuitabilityResult

COMFORT_LOW_C = 10.0
COMFORT_HIGH_C = 26.0

SUMMARIES = {
    Badge.PRIME: "Great window for a walk",
    Badge.FAIR: "Acceptable with minor tradeoffs",
    Badge.POOR: "Consider waiting for better conditions",
}

Rule = Callable[[SuitabilityInputs], tuple[float, list[str]]]


def precipitation_rule(inputs: SuitabilityInputs) -> tuple[float, list[str]]:
    penalty = min(35.0, inputs.precipitation_mm * 12)
    if penalty <= 0:
        return 0.0, []
    return penalty, ["Steady rain expected" if penalty > 15 else "Light drizzle possible"]


def precipitation_chance_rule(inputs: SuitabilityInputs) -> tuple[float, list[str]]:
    if inputs.precipitation_probability <= 35:
        return 0.0, []
    return ((inputs.precipitation_probability - 35) / 65) * 20, ["Elevated chance of precipitation"]


def wind_rule(inputs: SuitabilityInputs) -> tuple[float, list[str]]:
    if inputs.wind_speed_kph <= 24:
        return 0.0, []
    return min(20.0, (inputs.wind_speed_kph - 24) * 0.8), ["Breezy conditions"]


def cold_rule(inputs: SuitabilityInputs) -> tuple[float, list[str]]:
    feels = inputs.apparent_temperature_c
    if feels >= COMFORT_LOW_C:
        return 0.0, []
    factors = []
    if feels < 5:
        factors.append("Bundle up")
    if feels < -5:
        factors.append("Watch for icy paws")
    return min(40.0, (COMFORT_LOW_C - feels) * 1.7), factors


def heat_rule(inputs: SuitabilityInputs) -> tuple[float, list[str]]:
    feels = inputs.apparent_temperature_c
    if feels <= COMFORT_HIGH_C:
        return 0.0, []
    factors = ["Warm and potentially uncomfortable"]
    if feels > 30:
        factors.append("Bring extra water")
    return min(35.0, (feels - COMFORT_HIGH_C) * 1.5), factors


def rain_jacket_rule(inputs: SuitabilityInputs) -> tuple[float, list[str]]:
    if inputs.precipitation_probability > 55:
        return 0.0, ["Wear a rain jacket"]
    return 0.0, []


# Evaluation order is also the order factors are displayed in.
RULES: tuple[Rule, ...] = (
    precipitation_rule,
    precipitation_chance_rule,
    wind_rule,
    cold_rule,
    heat_rule,
    rain_jacket_rule,
)


def badge_for(score: int) -> Badge:
    if score >= 75:
        return Badge.PRIME
    if score >= 50:
        return Badge.FAIR
    return Badge.POOR


def score_suitability(inputs: SuitabilityInputs) -> SuitabilityResult:
    """Score how pleasant a walk would be under the given conditions.

    Penalties from every rule are summed against a starting score of 100, the
    total is clamped to [0, 100] once, and then rounded half-up. The badge is
    derived from the rounded score.
    """
    score = 100.0
    factors: list[str] = []
    for rule in RULES:
        penalty, notes = rule(inputs)
        score -= penalty
        factors.extend(notes)

    rounded = math.floor(max(0.0, min(100.0, score)) + 0.5)
    badge = badge_for(rounded)
    return SuitabilityResult(score=rounded, badge=badge, summary=SUMMARIES[badge], factors=factors)
