# -*- coding: utf-8 -*-
"""
Контроллер прогноза.

Держит текущий снимок прогноза (ForecastBundle), флаг загрузки и активный язык.
Источник города: сохранённая настройка, выбор из поиска или смена языка.

Правила:
- флаг загрузки ставится синхронно до начала запроса и снимается, когда
  последний выданный запрос завершился (успехом или ошибкой);
- снимок только заменяется целиком;
- город сохраняется только после успешного прогноза;
- ответ устаревшего запроса (выдан раньше последнего) игнорируется.
"""

import logging
from typing import Optional

from config.db_config import CITY_PREFERENCE_KEY
from core.event_bus import (
    FORECAST_FAILED,
    FORECAST_UPDATED,
    LOADING_CHANGED,
    LOCALE_CHANGED,
    EventBus,
)
from core.models.weather_response import ForecastBundle
from core.utils.api_client import WeatherAPIError
from core.utils.error_handler import log_exception
from core.utils.validator import validate_locale

logger = logging.getLogger("forecast_controller")

DEFAULT_CITY = "Bangui"
FORECAST_DAYS = 7


class ForecastController:

    def __init__(
        self,
        api_client,
        preferences,
        events: Optional[EventBus] = None,
        default_city: str = DEFAULT_CITY,
        locale: str = "fr",
        forecast_days: int = FORECAST_DAYS
    ):
        self.api_client = api_client
        self.preferences = preferences
        self.events = events or EventBus()
        self.default_city = default_city
        self.forecast_days = forecast_days

        self.locale = validate_locale(locale)
        self.bundle: Optional[ForecastBundle] = None
        self.loading = False
        # Город, для которого показан текущий снимок
        self.city: Optional[str] = None

        self._generation = 0
        self._requested_city: Optional[str] = None
        # Сохранять ли город запроса в полёте (выбор пользователя) или нет
        self._requested_persist = False

    # === СОСТОЯНИЕ ЗАПРОСОВ ===
    def begin_loading(self) -> int:
        """
        Синхронно переводит контроллер в состояние загрузки.
        Возвращает номер запроса; только последний номер может обновить снимок.
        """
        self._generation += 1
        self.loading = True
        return self._generation

    def _is_latest(self, generation: int) -> bool:
        return generation == self._generation

    # === ОПЕРАЦИИ ===
    async def initialize(self) -> bool:
        """Загружает сохранённый город (или город по умолчанию) и его прогноз."""
        generation = self.begin_loading()
        await self.events.emit_event(LOADING_CHANGED, {"loading": True})

        city = await self._load_saved_city()
        logger.info(f"🚀 Инициализация экрана: город '{city}', язык '{self.locale}'")
        return await self._fetch(city, self.locale, generation, persist=False)

    async def select_city(self, name: str, locale: Optional[str] = None, generation: Optional[int] = None) -> bool:
        """
        Запрашивает прогноз для выбранного города и сохраняет город при успехе.

        Args:
            name: Название города (разрешается на стороне провайдера)
            locale: Язык запроса; по умолчанию активный
            generation: Номер, полученный из begin_loading(), если загрузка уже начата

        Returns:
            True, если снимок обновлён
        """
        locale = validate_locale(locale or self.locale)
        if generation is None:
            generation = self.begin_loading()
        self._track_request(name, persist=True)
        await self.events.emit_event(LOADING_CHANGED, {"loading": True})
        logger.info(f"📍 Выбран город '{name}' ({locale})")
        return await self._fetch(name, locale, generation, persist=True)

    async def change_locale(self, locale: str) -> bool:
        """
        Меняет активный язык и перезапрашивает прогноз.

        Если загрузка ещё идёт, повторяется запрос в полёте (с тем же намерением
        сохранить город), иначе перезапрашивается показанный город. Сам язык
        в настройки не пишется.
        """
        locale = validate_locale(locale)
        previous = self.locale
        self.locale = locale
        pending = self.loading
        generation = self.begin_loading()
        await self.events.emit_event(LOCALE_CHANGED, {"locale": locale, "previous": previous})
        await self.events.emit_event(LOADING_CHANGED, {"loading": True})

        if pending and self._requested_city:
            city, persist = self._requested_city, self._requested_persist
        else:
            city, persist = self.city or self._requested_city or self.default_city, False
        logger.info(f"🌐 Язык: {previous} -> {locale}, обновляем прогноз для '{city}'")
        return await self._fetch(city, locale, generation, persist=persist)

    # === ВНУТРЕННЯЯ ЛОГИКА ===
    def _track_request(self, city: str, persist: bool) -> None:
        self._requested_city = city
        self._requested_persist = persist

    async def _load_saved_city(self) -> str:
        try:
            saved = await self.preferences.get(CITY_PREFERENCE_KEY)
        except Exception as e:
            # Хранилище недоступно: то же самое, что "ничего не сохранено"
            log_exception(e, "⚠️ Не удалось прочитать сохранённый город")
            saved = None
        return saved or self.default_city

    async def _fetch(self, city: str, locale: str, generation: int, persist: bool) -> bool:
        self._track_request(city, persist)
        try:
            bundle = await self.api_client.get_forecast(city, self.forecast_days, locale)
        except WeatherAPIError as e:
            log_exception(e, "❌ Не удалось получить прогноз", {"city": city, "locale": locale})
            if not self._is_latest(generation):
                return False
            self.loading = False
            await self.events.emit_event(FORECAST_FAILED, {"city": city, "locale": locale, "error": str(e)})
            await self.events.emit_event(LOADING_CHANGED, {"loading": False})
            return False

        if not self._is_latest(generation):
            logger.info(f"⏭️ Устаревший ответ для '{city}' ({locale}) проигнорирован")
            return False

        self.bundle = bundle
        self.city = city
        self.loading = False

        if persist:
            await self._save_city(city)

        await self.events.emit_event(FORECAST_UPDATED, {"bundle": bundle, "city": city, "locale": locale})
        # Пока сохраняли город, мог начаться новый запрос
        if self._is_latest(generation):
            await self.events.emit_event(LOADING_CHANGED, {"loading": False})
        return True

    async def _save_city(self, city: str) -> None:
        try:
            await self.preferences.set(CITY_PREFERENCE_KEY, city)
        except Exception as e:
            log_exception(e, "⚠️ Не удалось сохранить город", {"city": city})
