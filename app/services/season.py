# app/services/season.py

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional, Tuple

from app.services.color_space import Hsl, Rgb, average_hsl, rgb_to_hsl

logger = logging.getLogger(__name__)

UNKNOWN_SEASON = "Unknown Season"
NO_RECOMMENDATION = "No specific outfit recommendations."
SATURATION_SPLIT = 50


@dataclass(frozen=True)
class Range:
    """A numeric interval with independently open or closed ends."""
    low: float
    high: float
    include_low: bool = True
    include_high: bool = True

    def contains(self, value: float) -> bool:
        above = value >= self.low if self.include_low else value > self.low
        below = value <= self.high if self.include_high else value < self.high
        return above and below


@dataclass(frozen=True)
class SeasonRule:
    """
    One row of the season table.

    `high_saturation` is None when the rule ignores saturation, True when it
    requires avg saturation > 50 and False when it requires <= 50.
    """
    lightness: Range
    hue: Range
    high_saturation: Optional[bool]
    season: str

    def matches(self, avg: Hsl) -> bool:
        if not (self.lightness.contains(avg.l) and self.hue.contains(avg.h)):
            return False
        if self.high_saturation is None:
            return True
        return (avg.s > SATURATION_SPLIT) == self.high_saturation


# Lightness tiers
LIGHT = Range(75, math.inf, include_low=False)
MID = Range(40, 75)
DARK = Range(-math.inf, 40, include_high=False)

# Hue bands
WARM_HUES = Range(0, 50)
YELLOW_GREEN_HUES = Range(50, 150, include_low=False)
COOL_HUES = Range(150, 280, include_low=False)
VIOLET_RED_HUES = Range(280, 360, include_low=False)

# Evaluated top to bottom, first match wins. The light tier only covers
# hues up to 150; anything above falls through to UNKNOWN_SEASON.
SEASON_RULES: Tuple[SeasonRule, ...] = (
    SeasonRule(LIGHT, WARM_HUES, None, "Light Spring"),
    SeasonRule(LIGHT, YELLOW_GREEN_HUES, None, "Light Summer"),

    SeasonRule(MID, WARM_HUES, True, "True Spring"),
    SeasonRule(MID, WARM_HUES, False, "Soft Spring"),
    SeasonRule(MID, YELLOW_GREEN_HUES, True, "True Summer"),
    SeasonRule(MID, YELLOW_GREEN_HUES, False, "Soft Summer"),
    SeasonRule(MID, COOL_HUES, True, "True Autumn"),
    SeasonRule(MID, COOL_HUES, False, "Soft Autumn"),
    SeasonRule(MID, VIOLET_RED_HUES, True, "True Winter"),
    SeasonRule(MID, VIOLET_RED_HUES, False, "Cool Winter"),

    SeasonRule(DARK, WARM_HUES, None, "Warm Spring"),
    SeasonRule(DARK, YELLOW_GREEN_HUES, None, "Cool Summer"),
    SeasonRule(DARK, COOL_HUES, None, "Deep Autumn"),
    SeasonRule(DARK, VIOLET_RED_HUES, None, "Deep Winter"),
)

OUTFIT_SUGGESTIONS = MappingProxyType({
    "Light Spring": ("Soft peach", "Warm pink", "Pale gold"),
    "True Spring": ("Bright coral", "Leaf green", "Golden yellow"),
    "Warm Spring": ("Sunny orange", "Turquoise", "Rich cream"),
    "Light Summer": ("Lavender", "Powder blue", "Cool mint"),
    "True Summer": ("Soft navy", "Rose pink", "Cool taupe"),
    "Cool Summer": ("Dusky teal", "Ice blue", "Slate grey"),
    "Soft Autumn": ("Warm olive", "Dusty rose", "Burnt sienna"),
    "True Autumn": ("Rust", "Pumpkin", "Mustard yellow"),
    "Deep Autumn": ("Espresso", "Dark teal", "Burgundy"),
    "Cool Winter": ("Deep emerald", "Ruby red", "Icy silver"),
    "True Winter": ("Black", "Royal blue", "Pure white"),
    "Deep Winter": ("Dark charcoal", "Electric blue", "Jewel tones"),
})


@dataclass(frozen=True)
class SeasonAnalysis:
    detected_season: str
    outfit_suggestions: List[str]
    face_hsl: Hsl
    hair_hsl: Hsl
    eye_hsl: Hsl
    average_hsl: Hsl


def season_for_average(avg: Hsl) -> str:
    """Looks up the season for already averaged HSL values."""
    for rule in SEASON_RULES:
        if rule.matches(avg):
            return rule.season
    return UNKNOWN_SEASON


def determine_season(face_hsl: Hsl, hair_hsl: Hsl, eye_hsl: Hsl) -> str:
    """Classifies the subject from the face, hair and eye samples."""
    return season_for_average(average_hsl(face_hsl, hair_hsl, eye_hsl))


def get_outfit_suggestions(season: str) -> List[str]:
    return list(OUTFIT_SUGGESTIONS.get(season, (NO_RECOMMENDATION,)))


def classify(face_rgb: Rgb, hair_rgb: Rgb, eye_rgb: Rgb) -> SeasonAnalysis:
    """
    Runs the whole pipeline on three sampled pixels: HSL conversion,
    averaging, season lookup and outfit suggestions.
    """
    face_hsl = rgb_to_hsl(*face_rgb)
    hair_hsl = rgb_to_hsl(*hair_rgb)
    eye_hsl = rgb_to_hsl(*eye_rgb)
    avg = average_hsl(face_hsl, hair_hsl, eye_hsl)

    logger.debug("Average HSL: %s", avg)
    logger.debug("Face HSL: %s, Hair HSL: %s, Eye HSL: %s", face_hsl, hair_hsl, eye_hsl)

    season = season_for_average(avg)
    return SeasonAnalysis(
        detected_season=season,
        outfit_suggestions=get_outfit_suggestions(season),
        face_hsl=face_hsl,
        hair_hsl=hair_hsl,
        eye_hsl=eye_hsl,
        average_hsl=avg,
    )
