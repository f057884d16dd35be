# -*- coding: utf-8 -*-
"""
Интеграционный тест экрана погоды:
WeatherScreen + настоящее SQLite-хранилище + клиент WeatherAPI без сети.

Сценарии:
1. Поиск "Lon" -> выбор London -> прогноз на 7 дней, город сохранён
2. Первый запуск без сохранённого города -> Bangui
3. Смена языка fr -> en при показанном Paris
4. Перезапуск: сохранённый город восстанавливается
"""
import asyncio

from config.db_config import CITY_PREFERENCE_KEY
from core.db.preference_db import PreferenceDB
from core.event_bus import CANDIDATES_UPDATED, FORECAST_UPDATED
from core.models.weather_response import Location
from scripts.weather.weather_screen import WeatherScreen
from tests.fakes import FakeWeatherClient

DEBOUNCE = 0.05

LON_RESULTS = [Location("London", "UK"), Location("Londonderry", "UK")]


def make_screen(client, db_path, locale="fr"):
    return WeatherScreen(client, PreferenceDB(db_path=db_path), locale=locale, debounce_sec=DEBOUNCE)


async def test_search_select_and_persist(tmp_path):
    client = FakeWeatherClient(locations={"Lon": LON_RESULTS})
    screen = make_screen(client, tmp_path / "prefs.db")
    await screen.mount()

    await screen.search.toggle_search()
    await screen.search.on_query_changed("Lon")
    await asyncio.sleep(DEBOUNCE * 3)
    assert screen.search.candidates == LON_RESULTS

    await screen.search.on_candidate_selected(screen.search.candidates[0])

    assert screen.search.candidates == []
    assert screen.search.show_search is False
    assert client.forecast_calls[-1] == ("London", 7, "fr")
    assert len(screen.forecast.bundle.days) == 7
    assert await PreferenceDB(db_path=tmp_path / "prefs.db").get(CITY_PREFERENCE_KEY) == "London"
    print("✅ Сценарий поиска и выбора пройден")


async def test_first_start_uses_fallback_city(tmp_path):
    client = FakeWeatherClient()
    screen = make_screen(client, tmp_path / "prefs.db")

    assert await screen.mount() is True

    assert client.forecast_calls == [("Bangui", 7, "fr")]
    assert screen.forecast.bundle.location.name == "Bangui"
    # Город по умолчанию не записывается
    assert await PreferenceDB(db_path=tmp_path / "prefs.db").get(CITY_PREFERENCE_KEY) is None


async def test_locale_change_refetches_displayed_city(tmp_path):
    db_path = tmp_path / "prefs.db"
    client = FakeWeatherClient()
    screen = make_screen(client, db_path, locale="fr")
    await screen.forecast.select_city("Paris")
    assert screen.forecast.bundle.current.condition_text == "Ensoleillé"

    # Сохранённое значение меняем напрямую, чтобы убедиться, что смена языка его не трогает
    await PreferenceDB(db_path=db_path).set(CITY_PREFERENCE_KEY, "Paris")
    updates = []

    async def on_updated(event):
        updates.append((event["city"], event["locale"]))

    screen.events.subscribe_async(FORECAST_UPDATED, on_updated)

    await screen.forecast.change_locale("en")

    assert client.forecast_calls[-1] == ("Paris", 7, "en")
    assert screen.locale == "en"
    assert screen.forecast.bundle.current.condition_text == "Sunny"
    assert updates == [("Paris", "en")]
    assert await PreferenceDB(db_path=db_path).get(CITY_PREFERENCE_KEY) == "Paris"


async def test_restart_restores_saved_city(tmp_path):
    db_path = tmp_path / "prefs.db"
    first = make_screen(FakeWeatherClient(), db_path)
    await first.forecast.select_city("London")
    first.close()

    client = FakeWeatherClient()
    second = make_screen(client, db_path)
    await second.mount()

    assert client.forecast_calls == [("London", 7, "fr")]


async def test_unresolvable_city_keeps_previous_state(tmp_path):
    db_path = tmp_path / "prefs.db"
    client = FakeWeatherClient(failing={"Atlantis"})
    screen = make_screen(client, db_path)
    await screen.mount()

    await screen.search.on_candidate_selected(Location("Atlantis", ""))

    assert screen.forecast.bundle.location.name == "Bangui"
    assert screen.forecast.loading is False
    assert await PreferenceDB(db_path=db_path).get(CITY_PREFERENCE_KEY) is None


async def test_short_query_after_results_clears_list(tmp_path):
    client = FakeWeatherClient(locations={"Lon": LON_RESULTS})
    screen = make_screen(client, tmp_path / "prefs.db")
    published = []

    async def on_candidates(event):
        published.append(len(event["candidates"]))

    screen.events.subscribe_async(CANDIDATES_UPDATED, on_candidates)

    await screen.search.on_query_changed("Lon")
    await asyncio.sleep(DEBOUNCE * 3)
    await screen.search.on_query_changed("L")

    assert screen.search.candidates == []
    assert published == [2, 0]
    assert len(client.search_calls) == 1
