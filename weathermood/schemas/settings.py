from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from weathermood.schemas.weather import TemperatureUnit


NEWS_CATEGORIES = (
    "business",
    "entertainment",
    "general",
    "health",
    "science",
    "sports",
    "technology",
)


class UserSettings(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    news_categories: tuple[str, ...] = Field(default=("general",))
    enable_weather_filtering: bool = True

    @field_validator("news_categories", mode="before")
    @classmethod
    def _dedupe_categories(cls, value):
        if isinstance(value, str):
            value = [value]
        seen: dict[str, None] = {}
        for item in value or ():
            name = str(item).strip()
            if name:
                seen.setdefault(name, None)
        if not seen:
            raise ValueError("news_categories must contain at least one category")
        return tuple(seen)


class UserSettingsUpdate(BaseModel):
    """Partial update; only fields that were explicitly set are merged."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    temperature_unit: TemperatureUnit | None = None
    news_categories: list[str] | None = None
    enable_weather_filtering: bool | None = None


DEFAULT_USER_SETTINGS = UserSettings()
