# -*- coding: utf-8 -*-
"""
Обёртка для WeatherAPI (https://www.weatherapi.com).
Поддерживает:
- Поиск локаций по части названия: search_locations(partial_name, locale)
- Прогноз по названию города: get_forecast(city_name, days, locale)

Запросы синхронные (requests), но выполняются в executor'е,
чтобы не блокировать event loop экрана.
Повторов нет: любая ошибка сети/разбора -> WeatherAPIError.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from core.models.weather_response import ForecastBundle, Location, WeatherResponseError

logger = logging.getLogger("api_client")

# === КОНФИГУРАЦИЯ API ===
BASE_URL = "https://api.weatherapi.com/v1"
API_TIMEOUT = 12  # секунд
MAX_FORECAST_DAYS = 10  # лимит WeatherAPI


class WeatherAPIError(RuntimeError):
    """Единый тип ошибки для сети, HTTP-статусов и разбора ответа."""


class WeatherAPIClient:
    """Клиент для WeatherAPI."""

    def __init__(self, api_key: str, timeout: float = API_TIMEOUT, base_url: str = BASE_URL):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    def _get_json(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """HTTP GET с таймаутом. Все ошибки приводятся к WeatherAPIError."""
        if not self.api_key:
            raise WeatherAPIError("WEATHER_API_KEY не задан")

        url = f"{self.base_url}/{endpoint}"
        query = {"key": self.api_key, **params}
        try:
            response = requests.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise WeatherAPIError(f"Ошибка сети при запросе {endpoint}: {e}") from e

        if response.status_code >= 400:
            # WeatherAPI отдаёт {"error": {"code": ..., "message": ...}}
            try:
                message = response.json()["error"]["message"]
            except (ValueError, KeyError, TypeError):
                message = (response.text or "")[:300]
            raise WeatherAPIError(f"HTTP {response.status_code} для {endpoint}: {message}")

        try:
            return response.json()
        except ValueError as e:
            raise WeatherAPIError(f"Некорректный JSON от {endpoint}: {e}") from e

    # === СИНХРОННЫЕ МЕТОДЫ ===
    def search_locations_sync(self, partial_name: str, locale: str) -> List[Location]:
        data = self._get_json("search.json", {"q": partial_name, "lang": locale})
        if not isinstance(data, list):
            raise WeatherAPIError(f"Поиск вернул не список: {type(data).__name__}")
        try:
            locations = [Location.from_api(item) for item in data]
        except WeatherResponseError as e:
            raise WeatherAPIError(str(e)) from e

        logger.info(f"🔍 WeatherAPI: найдено {len(locations)} локаций для '{partial_name}'")
        return locations

    def get_forecast_sync(self, city_name: str, days: int = 7, locale: str = "en") -> ForecastBundle:
        if not (1 <= days <= MAX_FORECAST_DAYS):
            raise WeatherAPIError(f"'days' должен быть от 1 до {MAX_FORECAST_DAYS} (получено {days})")

        data = self._get_json("forecast.json", {
            "q": city_name,
            "days": days,
            "lang": locale,
            "aqi": "no",
            "alerts": "no"
        })
        try:
            bundle = ForecastBundle.from_api(data, locale=locale)
        except WeatherResponseError as e:
            raise WeatherAPIError(str(e)) from e

        logger.info(f"✅ WeatherAPI: прогноз на {days} дн. получен для '{city_name}' ({locale})")
        return bundle

    # === АСИНХРОННЫЕ МЕТОДЫ ===
    async def search_locations(self, partial_name: str, locale: str) -> List[Location]:
        """
        Ищет локации по части названия.

        Args:
            partial_name: Введённый пользователем текст
            locale: Двухбуквенный код языка

        Returns:
            Список локаций в порядке, в котором их вернул провайдер
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.search_locations_sync, partial_name, locale)

    async def get_forecast(self, city_name: str, days: int = 7, locale: str = "en") -> ForecastBundle:
        """
        Получает текущую погоду и прогноз на `days` дней.

        Raises:
            WeatherAPIError: сеть, HTTP-ошибка, неизвестный город или битый ответ
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_forecast_sync, city_name, days, locale)


def create_client(api_key: Optional[str], timeout: float = API_TIMEOUT) -> WeatherAPIClient:
    """Удобная функция для создания клиента из конфигурации."""
    return WeatherAPIClient(api_key=api_key or "", timeout=timeout)
