# -*- coding: utf-8 -*-
"""
Контроллер поиска городов (автодополнение с debounce).
"""

import logging
from typing import List, Optional

from core.event_bus import CANDIDATES_UPDATED, SEARCH_VISIBILITY_CHANGED, EventBus
from core.models.weather_response import Location
from core.utils.api_client import WeatherAPIError
from core.utils.debounce import Debouncer
from core.utils.error_handler import log_exception
from core.utils.validator import sanitize_user_input
from scripts.weather.forecast_controller import ForecastController

logger = logging.getLogger("search_controller")

MIN_QUERY_LENGTH = 3
SEARCH_DEBOUNCE_SEC = 1.2


class SearchController:
    """
    Принимает ввод из строки поиска и держит список кандидатов.

    Кандидаты приходят от провайдера как есть: без сортировки и дедупликации.
    Активный язык берётся у контроллера прогноза.
    """

    def __init__(
        self,
        api_client,
        forecast: ForecastController,
        events: EventBus = None,
        debounce_sec: float = SEARCH_DEBOUNCE_SEC
    ):
        self.api_client = api_client
        self.forecast = forecast
        self.events = events or forecast.events

        self.candidates: List[Location] = []
        # Номер текущего списка кандидатов; меняется при каждой замене списка
        self.candidates_version = 0
        self.show_search = False
        self.query = ""

        self._generation = 0
        self._debounced_search = Debouncer(self._search, delay=debounce_sec)

    @property
    def locale(self) -> str:
        return self.forecast.locale

    # === ВВОД ===
    async def on_query_changed(self, text: str) -> None:
        """
        Обрабатывает изменение текста в строке поиска.

        Длина считается по введённому тексту (без краевых пробелов), в сеть
        уходит очищенный запрос. Короткий ввод (<= 2 символов) или ввод, от
        которого после очистки ничего не осталось, не уходит в сеть: отложенный
        поиск отменяется, список кандидатов очищается.
        """
        query = sanitize_user_input(text)
        self.query = query

        if len(text.strip()) < MIN_QUERY_LENGTH or not query:
            self._invalidate_search()
            if self.candidates:
                await self._replace_candidates([])
            return

        self._debounced_search(query)

    async def on_candidate_selected(self, location: Location) -> bool:
        """Выбор кандидата: очистка поиска, скрытие строки, загрузка прогноза."""
        self._invalidate_search()
        self.candidates = []
        self.candidates_version += 1
        self.query = ""
        self.show_search = False
        generation = self.forecast.begin_loading()

        await self.events.emit_event(CANDIDATES_UPDATED, {"candidates": []})
        await self.events.emit_event(SEARCH_VISIBILITY_CHANGED, {"show_search": False})

        return await self.forecast.select_city(location.name, generation=generation)

    async def toggle_search(self) -> bool:
        """Показывает/скрывает строку поиска. Кандидаты при этом не трогаются."""
        self.show_search = not self.show_search
        await self.events.emit_event(SEARCH_VISIBILITY_CHANGED, {"show_search": self.show_search})
        return self.show_search

    def cancel_pending(self) -> None:
        self._invalidate_search()

    # === ВНУТРЕННЯЯ ЛОГИКА ===
    def _invalidate_search(self) -> None:
        """Отменяет отложенный поиск и делает устаревшими уже отправленные."""
        self._debounced_search.cancel()
        self._generation += 1

    async def _search(self, query: str) -> None:
        self._generation += 1
        generation = self._generation
        locale = self.locale

        logger.info(f"🔍 Поиск локаций: '{query}' ({locale})")
        try:
            locations = await self.api_client.search_locations(query, locale)
        except WeatherAPIError as e:
            # Список кандидатов остаётся прежним
            log_exception(e, "❌ Поиск локаций не удался", {"query": query, "locale": locale})
            return

        if generation != self._generation:
            logger.debug("⏭️ Устаревший результат поиска для '%s' проигнорирован", query)
            return

        await self._replace_candidates(list(locations))

    def candidate_at(self, version: int, index: int) -> Optional[Location]:
        """Кандидат из списка с номером version; None, если список уже сменился."""
        if version != self.candidates_version or not 0 <= index < len(self.candidates):
            return None
        return self.candidates[index]

    async def _replace_candidates(self, candidates: List[Location]) -> None:
        self.candidates = candidates
        self.candidates_version += 1
        await self.events.emit_event(CANDIDATES_UPDATED, {"candidates": list(candidates)})
