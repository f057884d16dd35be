# core/models/weather_response.py
# -*- coding: utf-8 -*-
"""
Модели ответа WeatherAPI: локации из поиска и снимок прогноза.

Все модели неизменяемые (frozen). Новый прогноз всегда заменяет старый целиком.
Разбор JSON провайдера: здесь же, чтобы клиент API оставался тонким.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple


class WeatherResponseError(ValueError):
    """Ответ провайдера не соответствует ожидаемой структуре."""


def normalize_icon_url(icon: Optional[str]) -> str:
    """
    Приводит ссылку на иконку к абсолютному https-адресу.

    WeatherAPI отдаёт протокол-относительные ссылки вида
    "//cdn.weatherapi.com/weather/64x64/day/116.png".
    """
    if not icon:
        return ""
    if icon.startswith("//"):
        return "https:" + icon
    if icon.startswith(("http://", "https://")):
        return icon
    return "https://" + icon


@dataclass(frozen=True)
class Location:
    name: str
    country: str
    region: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Location":
        try:
            return cls(
                name=str(raw["name"]),
                country=str(raw.get("country") or ""),
                region=str(raw.get("region") or ""),
                lat=raw.get("lat"),
                lon=raw.get("lon")
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise WeatherResponseError(f"Некорректная локация: {raw!r}") from e

    @property
    def label(self) -> str:
        return f"{self.name}, {self.country}" if self.country else self.name


@dataclass(frozen=True)
class CurrentConditions:
    temperature_c: float
    condition_text: str
    condition_icon_url: str
    wind_kph: float
    humidity_pct: float


@dataclass(frozen=True)
class DayForecast:
    date: date
    avg_temperature_c: float
    sunrise_time: str
    condition_text: str = ""
    condition_icon_url: str = ""


@dataclass(frozen=True)
class ForecastBundle:
    """Полный снимок: текущая погода + прогноз по дням для пары город/язык."""
    location: Location
    current: CurrentConditions
    days: Tuple[DayForecast, ...] = field(default_factory=tuple)
    locale: str = ""

    @property
    def sunrise_today(self) -> Optional[str]:
        return self.days[0].sunrise_time if self.days else None

    @classmethod
    def from_api(cls, payload: Dict[str, Any], locale: str = "") -> "ForecastBundle":
        """
        Собирает снимок из ответа /forecast.json.

        Raises:
            WeatherResponseError: если в ответе нет обязательных полей
        """
        try:
            location = Location.from_api(payload["location"])

            current_raw = payload["current"]
            condition = current_raw.get("condition") or {}
            current = CurrentConditions(
                temperature_c=float(current_raw["temp_c"]),
                condition_text=str(condition.get("text", "")),
                condition_icon_url=normalize_icon_url(condition.get("icon")),
                wind_kph=float(current_raw["wind_kph"]),
                humidity_pct=float(current_raw["humidity"])
            )

            days: List[DayForecast] = []
            for item in payload["forecast"]["forecastday"]:
                day_raw = item.get("day") or {}
                day_condition = day_raw.get("condition") or {}
                days.append(DayForecast(
                    date=date.fromisoformat(item["date"]),
                    avg_temperature_c=float(day_raw["avgtemp_c"]),
                    sunrise_time=str((item.get("astro") or {}).get("sunrise", "")),
                    condition_text=str(day_condition.get("text", "")),
                    condition_icon_url=normalize_icon_url(day_condition.get("icon"))
                ))
        except WeatherResponseError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise WeatherResponseError(f"Неожиданная структура прогноза: {e!r}") from e

        return cls(location=location, current=current, days=tuple(days), locale=locale)
