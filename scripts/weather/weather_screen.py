# -*- coding: utf-8 -*-
"""
Экран погоды: контроллер поиска + контроллер прогноза + их шина событий.

Это единственный объект, который получает слой отображения.
Всё состояние экрана (снимок, кандидаты, язык, флаги): поля контроллеров.
"""

import logging

from core.event_bus import EventBus
from scripts.weather.forecast_controller import DEFAULT_CITY, FORECAST_DAYS, ForecastController
from scripts.weather.search_controller import SEARCH_DEBOUNCE_SEC, SearchController

logger = logging.getLogger("weather_screen")


class WeatherScreen:

    def __init__(
        self,
        api_client,
        preferences,
        default_city: str = DEFAULT_CITY,
        locale: str = "fr",
        forecast_days: int = FORECAST_DAYS,
        debounce_sec: float = SEARCH_DEBOUNCE_SEC
    ):
        self.events = EventBus()
        self.forecast = ForecastController(
            api_client,
            preferences,
            events=self.events,
            default_city=default_city,
            locale=locale,
            forecast_days=forecast_days
        )
        self.search = SearchController(api_client, self.forecast, events=self.events, debounce_sec=debounce_sec)

    @property
    def locale(self) -> str:
        return self.forecast.locale

    async def mount(self) -> bool:
        """Первое отображение экрана: сохранённый город и его прогноз."""
        logger.info("📱 Экран погоды открыт")
        return await self.forecast.initialize()

    def close(self) -> None:
        self.search.cancel_pending()
        logger.info("📴 Экран погоды закрыт")
