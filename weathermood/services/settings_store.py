from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Mapping

from pydantic import ValidationError

from weathermood.core.errors import PersistenceFailure
from weathermood.db.kv_store import KeyValueStore
from weathermood.schemas.settings import DEFAULT_USER_SETTINGS, UserSettings, UserSettingsUpdate
from weathermood.schemas.weather import TemperatureUnit


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "userSettings"

SettingsListener = Callable[[UserSettings, UserSettings], Awaitable[None]]


class SettingsStore:
    """Holds the user's preferences and writes every change through to storage.

    Writes are best effort: a failed save is logged and the in-memory value
    is kept. Reads at startup never raise; anything unreadable yields the
    defaults.
    """

    def __init__(self, storage: KeyValueStore, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._current = DEFAULT_USER_SETTINGS
        self._listeners: list[SettingsListener] = []

    def get(self) -> UserSettings:
        return self._current

    def subscribe(self, listener: SettingsListener) -> None:
        """Call `listener(previous, current)` after every accepted update."""
        self._listeners.append(listener)

    async def load_initial(self) -> UserSettings:
        try:
            raw = await self._storage.get(self._key)
        except PersistenceFailure as exc:
            logger.warning("Failed to load user settings: %s", exc)
            raw = None

        if raw is None:
            self._current = DEFAULT_USER_SETTINGS
            return self._current

        try:
            self._current = UserSettings.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Stored user settings are invalid, using defaults: %s", exc.errors()[:1])
            self._current = DEFAULT_USER_SETTINGS
        return self._current

    async def update(self, partial: UserSettingsUpdate | Mapping[str, Any]) -> UserSettings:
        if not isinstance(partial, UserSettingsUpdate):
            partial = UserSettingsUpdate.model_validate(dict(partial))

        previous = self._current
        merged = previous.model_dump()
        merged.update(partial.model_dump(exclude_unset=True, exclude_none=True))
        try:
            candidate = UserSettings.model_validate(merged)
        except ValidationError as exc:
            logger.info("Rejected settings update: %s", exc.errors()[0]["msg"])
            return previous

        self._current = candidate
        await self._persist(candidate)
        for listener in list(self._listeners):
            await listener(previous, candidate)
        return candidate

    async def _persist(self, value: UserSettings) -> None:
        payload = json.dumps(value.model_dump(mode="json", by_alias=True))
        try:
            await self._storage.set(self._key, payload)
        except PersistenceFailure as exc:
            logger.warning("Failed to save user settings: %s", exc)

    async def toggle_category(self, category: str) -> UserSettings:
        categories = list(self._current.news_categories)
        if category in categories:
            categories.remove(category)
        else:
            categories.append(category)
        return await self.update(UserSettingsUpdate(news_categories=categories))

    async def toggle_temperature_unit(self) -> UserSettings:
        unit = (
            TemperatureUnit.CELSIUS
            if self._current.temperature_unit is TemperatureUnit.FAHRENHEIT
            else TemperatureUnit.FAHRENHEIT
        )
        return await self.update(UserSettingsUpdate(temperature_unit=unit))

    async def toggle_weather_filtering(self) -> UserSettings:
        return await self.update(
            UserSettingsUpdate(enable_weather_filtering=not self._current.enable_weather_filtering)
        )

    async def reset_to_defaults(self) -> UserSettings:
        return await self.update(
            UserSettingsUpdate(
                temperature_unit=DEFAULT_USER_SETTINGS.temperature_unit,
                news_categories=list(DEFAULT_USER_SETTINGS.news_categories),
                enable_weather_filtering=DEFAULT_USER_SETTINGS.enable_weather_filtering,
            )
        )
