from __future__ import annotations

from weathermood.services.mood.classifier import Classification, MoodBand, classify
from weathermood.services.mood.filter import filter_articles

__all__ = ["Classification", "MoodBand", "classify", "filter_articles"]
