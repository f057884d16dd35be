# -*- coding: utf-8 -*-
"""
Форматирование состояния экрана в текст (HTML для Telegram).
"""

import logging
import os
from typing import Dict, List, Optional

from jinja2 import Template

from core.models.weather_response import ForecastBundle, Location

logger = logging.getLogger("formatter")

# Загружаем шаблоны из файлов
TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "_io", "templates")


def _load_template(name: str) -> Template:
    with open(os.path.join(TEMPLATES_DIR, name), "r", encoding="utf-8") as f:
        return Template(f.read(), autoescape=True)


FORECAST_TEMPLATE = _load_template("forecast.html.j2")
CANDIDATES_TEMPLATE = _load_template("candidates.html.j2")

# === ТЕКСТЫ ИНТЕРФЕЙСА ===
UI_TEXTS: Dict[str, Dict[str, str]] = {
    "en": {
        "search_placeholder": "Search city",
        "daily_forecast": "Daily forecast",
        "choose_city": "Choose a city:",
        "no_data": "Weather data unavailable",
        "loading": "⏳ Loading...",
        "language_name": "English",
    },
    "fr": {
        "search_placeholder": "Rechercher une ville",
        "daily_forecast": "Prévisions quotidiennes",
        "choose_city": "Choisissez une ville :",
        "no_data": "Données météo indisponibles",
        "loading": "⏳ Chargement...",
        "language_name": "Français",
    },
}

DAY_NAMES: Dict[str, List[str]] = {
    "en": ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"],
    "fr": ["LUNDI", "MARDI", "MERCREDI", "JEUDI", "VENDREDI", "SAMEDI", "DIMANCHE"],
}


def ui_texts(locale: str) -> Dict[str, str]:
    return UI_TEXTS.get(locale, UI_TEXTS["en"])


def day_name(value, locale: str) -> str:
    """Название дня недели заглавными буквами: MONDAY / LUNDI."""
    return DAY_NAMES.get(locale, DAY_NAMES["en"])[value.weekday()]


def format_forecast(bundle: Optional[ForecastBundle], locale: str) -> str:
    """
    Формирует текст прогноза.

    Пустой снимок (первая загрузка не удалась) -> сообщение "нет данных".
    """
    days = []
    if bundle is not None:
        days = [
            {
                "name": day_name(day.date, locale),
                "avg_temperature_c": day.avg_temperature_c,
                "condition_text": day.condition_text,
                "condition_icon_url": day.condition_icon_url,
            }
            for day in bundle.days
        ]
    else:
        logger.debug("Снимок прогноза пуст, показываем заглушку")
    text = FORECAST_TEMPLATE.render(bundle=bundle, days=days, texts=ui_texts(locale))
    return text.strip()


def format_candidates(candidates: List[Location], locale: str) -> str:
    return CANDIDATES_TEMPLATE.render(candidates=candidates, texts=ui_texts(locale)).strip()
