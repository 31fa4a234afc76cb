from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# Thresholds are in Celsius regardless of the unit the user displays.
COLD_BELOW_C = 10.0
COOL_UP_TO_C = 20.0
HOT_ABOVE_C = 25.0


class MoodBand(str, Enum):
    COLD = "cold"
    COOL = "cool"
    NEUTRAL = "neutral"
    HOT = "hot"


COLD_KEYWORDS = frozenset(
    {
        "depression", "sad", "gloomy", "melancholy", "despair", "hopelessness",
        "economic crisis", "recession", "unemployment", "poverty", "homelessness",
        "death", "tragedy", "disaster", "accident", "crime", "violence",
        "political turmoil", "corruption", "scandal", "failure", "bankruptcy",
        "disease", "illness", "pandemic", "epidemic", "outbreak",
    }
)

HOT_KEYWORDS = frozenset(
    {
        "fear", "terror", "horror", "panic", "anxiety", "dread",
        "threat", "danger", "warning", "alert", "emergency", "crisis",
        "attack", "invasion", "war", "conflict", "violence", "terrorism",
        "natural disaster", "earthquake", "tsunami", "hurricane", "wildfire",
        "climate change", "global warming", "extinction", "pollution", "contamination",
    }
)

COOL_KEYWORDS = frozenset(
    {
        "victory", "win", "success", "achievement", "triumph", "celebration",
        "happiness", "joy", "excitement", "optimism", "hope", "inspiration",
        "breakthrough", "discovery", "innovation", "progress", "advancement",
        "good news", "positive", "uplifting", "motivational", "encouraging",
        "sports win", "championship", "medal", "award", "recognition",
    }
)


@dataclass(frozen=True)
class Classification:
    band: MoodBand
    keywords: frozenset[str]


def classify(temperature_c: float) -> Classification:
    """Map a Celsius temperature to its mood band.

    cold: t < 10, cool: 10 <= t <= 20, neutral: 20 < t <= 25, hot: t > 25.
    The neutral band carries no keywords, so filtering passes everything.
    """
    if temperature_c < COLD_BELOW_C:
        return Classification(MoodBand.COLD, COLD_KEYWORDS)
    if temperature_c > HOT_ABOVE_C:
        return Classification(MoodBand.HOT, HOT_KEYWORDS)
    if temperature_c <= COOL_UP_TO_C:
        return Classification(MoodBand.COOL, COOL_KEYWORDS)
    return Classification(MoodBand.NEUTRAL, frozenset())
