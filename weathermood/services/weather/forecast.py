from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone as dt_timezone

from weathermood.schemas.weather import DailyForecast, ForecastSample, ForecastSeries


FORECAST_DAYS = 5


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _local_day(sample: ForecastSample, offset: dt_timezone) -> date:
    return sample.timestamp.astimezone(offset).date()


def build_daily_forecast(series: ForecastSeries, today: date, days: int = FORECAST_DAYS) -> list[DailyForecast]:
    """Collapse 3-hourly samples into one entry per upcoming calendar day.

    Days are taken in the forecast location's local time. ``today`` is
    excluded by full date, so a forecast crossing a month boundary keeps
    the matching day-of-month of the next month.
    """
    offset = dt_timezone(timedelta(seconds=series.utc_offset_seconds))
    by_day: dict[date, list[ForecastSample]] = {}
    for sample in series.samples:
        by_day.setdefault(_local_day(sample, offset), []).append(sample)

    upcoming = [day for day in sorted(by_day) if day != today][:days]

    result: list[DailyForecast] = []
    for day in upcoming:
        samples = by_day[day]
        avg = sum(s.temperature for s in samples) / len(samples)
        # Counter keeps insertion order, and max() returns the first maximum.
        counts = Counter(s.condition for s in samples)
        dominant = max(counts, key=counts.__getitem__)
        description = next(s.description for s in samples if s.condition == dominant)
        result.append(
            DailyForecast(
                day=day,
                temperature=_round_half_up(avg),
                condition=dominant,
                description=description,
            )
        )
    return result


def local_today(series: ForecastSeries) -> date:
    offset = dt_timezone(timedelta(seconds=series.utc_offset_seconds))
    return datetime.now(offset).date()
