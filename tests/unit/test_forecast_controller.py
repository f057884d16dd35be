# -*- coding: utf-8 -*-
"""
Тесты для scripts/weather/forecast_controller.py
Тестирует:
- Город по умолчанию и сохранённый город при инициализации
- Сохранение города только после успешного прогноза
- Флаг загрузки
- Смену языка
- Игнорирование устаревших ответов
"""
import asyncio

import pytest

from config.db_config import CITY_PREFERENCE_KEY
from core.event_bus import FORECAST_FAILED, FORECAST_UPDATED, LOADING_CHANGED
from scripts.weather.forecast_controller import ForecastController
from tests.fakes import FakeWeatherClient, MemoryPreferences


def make_controller(client=None, preferences=None, locale="fr"):
    return ForecastController(
        client or FakeWeatherClient(),
        preferences if preferences is not None else MemoryPreferences(),
        locale=locale
    )


async def test_initialize_without_saved_city_uses_default():
    client = FakeWeatherClient()
    controller = make_controller(client)

    assert await controller.initialize() is True

    assert client.forecast_calls == [("Bangui", 7, "fr")]
    assert controller.bundle.location.name == "Bangui"
    assert controller.city == "Bangui"
    assert controller.loading is False


async def test_initialize_with_saved_city():
    client = FakeWeatherClient()
    preferences = MemoryPreferences({CITY_PREFERENCE_KEY: "London"})
    controller = make_controller(client, preferences)

    await controller.initialize()

    assert client.forecast_calls == [("London", 7, "fr")]
    # Инициализация сама ничего не записывает
    assert preferences.set_calls == []


async def test_initialize_with_broken_storage_falls_back_to_default():
    client = FakeWeatherClient()
    controller = make_controller(client, MemoryPreferences(broken=True))

    assert await controller.initialize() is True
    assert client.forecast_calls[0][0] == "Bangui"


async def test_initialize_failure_clears_loading_without_data():
    client = FakeWeatherClient(failing={"Bangui"})
    controller = make_controller(client)
    failures = []

    async def on_failed(event):
        failures.append(event)

    controller.events.subscribe_async(FORECAST_FAILED, on_failed)

    assert await controller.initialize() is False

    assert controller.bundle is None
    assert controller.loading is False
    assert failures[0]["city"] == "Bangui"


async def test_select_city_persists_after_success():
    preferences = MemoryPreferences()
    controller = make_controller(preferences=preferences)

    assert await controller.select_city("London", "en") is True

    assert preferences.data[CITY_PREFERENCE_KEY] == "London"
    assert controller.bundle.location.name == "London"
    assert controller.bundle.locale == "en"


async def test_failed_select_never_changes_preference():
    client = FakeWeatherClient(failing={"Atlantis"})
    preferences = MemoryPreferences({CITY_PREFERENCE_KEY: "Paris"})
    controller = make_controller(client, preferences)
    await controller.initialize()
    previous_bundle = controller.bundle

    assert await controller.select_city("Atlantis") is False

    assert preferences.data[CITY_PREFERENCE_KEY] == "Paris"
    assert preferences.set_calls == []
    # Прежний снимок остаётся на экране
    assert controller.bundle is previous_bundle
    assert controller.loading is False


async def test_loading_flag_true_only_while_request_pending():
    client = FakeWeatherClient()
    gate = asyncio.Event()
    client.gates["London"] = gate
    controller = make_controller(client)
    loading_events = []

    async def on_loading(event):
        loading_events.append(event["loading"])

    controller.events.subscribe_async(LOADING_CHANGED, on_loading)
    assert controller.loading is False

    task = asyncio.create_task(controller.select_city("London"))
    await asyncio.sleep(0.01)
    assert controller.loading is True

    gate.set()
    await task
    assert controller.loading is False
    assert loading_events == [True, False]


async def test_begin_loading_is_synchronous():
    controller = make_controller()
    generation = controller.begin_loading()
    assert controller.loading is True

    await controller.select_city("London", generation=generation)
    assert controller.loading is False


async def test_change_locale_refetches_displayed_city_without_persisting():
    client = FakeWeatherClient()
    preferences = MemoryPreferences()
    controller = make_controller(client, preferences, locale="fr")
    await controller.select_city("Paris")
    preferences.set_calls.clear()

    assert await controller.change_locale("en") is True

    assert client.forecast_calls[-1] == ("Paris", 7, "en")
    assert controller.locale == "en"
    assert controller.bundle.current.condition_text == "Sunny"
    assert preferences.set_calls == []


async def test_change_locale_uses_displayed_not_persisted_city():
    client = FakeWeatherClient()
    preferences = MemoryPreferences({CITY_PREFERENCE_KEY: "London"})
    controller = make_controller(client, preferences)
    await controller.initialize()
    # Сохранённое значение разошлось с показанным городом
    preferences.data[CITY_PREFERENCE_KEY] = "Tokyo"

    await controller.change_locale("en")

    assert client.forecast_calls[-1] == ("London", 7, "en")


async def test_change_locale_rejects_unknown_locale():
    client = FakeWeatherClient()
    controller = make_controller(client)

    with pytest.raises(ValueError):
        await controller.change_locale("de")

    assert controller.locale == "fr"
    assert controller.loading is False
    assert client.forecast_calls == []


async def test_stale_response_does_not_overwrite_newer():
    client = FakeWeatherClient()
    slow_gate = asyncio.Event()
    client.gates["London"] = slow_gate
    preferences = MemoryPreferences()
    controller = make_controller(client, preferences)
    updates = []

    async def on_updated(event):
        updates.append(event["city"])

    controller.events.subscribe_async(FORECAST_UPDATED, on_updated)

    slow = asyncio.create_task(controller.select_city("London"))
    await asyncio.sleep(0.01)
    # Второй запрос выдан позже и отвечает быстрее
    assert await controller.select_city("Paris") is True
    assert controller.loading is False

    slow_gate.set()
    assert await slow is False

    assert controller.bundle.location.name == "Paris"
    assert controller.city == "Paris"
    assert preferences.data[CITY_PREFERENCE_KEY] == "Paris"
    assert updates == ["Paris"]


async def test_older_request_settling_keeps_loading_for_newer():
    client = FakeWeatherClient(failing={"Atlantis"})
    fast_gate, slow_gate = asyncio.Event(), asyncio.Event()
    client.gates["Atlantis"] = fast_gate
    client.gates["Paris"] = slow_gate
    controller = make_controller(client)

    first = asyncio.create_task(controller.select_city("Atlantis"))
    await asyncio.sleep(0.01)
    second = asyncio.create_task(controller.select_city("Paris"))
    await asyncio.sleep(0.01)

    # Старый запрос завершился ошибкой, новый ещё в полёте
    fast_gate.set()
    await first
    assert controller.loading is True

    slow_gate.set()
    await second
    assert controller.loading is False
    assert controller.bundle.location.name == "Paris"


async def test_change_locale_during_selection_keeps_selected_city():
    client = FakeWeatherClient()
    preferences = MemoryPreferences()
    controller = make_controller(client, preferences, locale="fr")
    await controller.select_city("Paris")
    gate = asyncio.Event()
    client.gates[("London", "fr")] = gate

    pending = asyncio.create_task(controller.select_city("London"))
    await asyncio.sleep(0.01)
    assert await controller.change_locale("en") is True

    assert client.forecast_calls[-1] == ("London", 7, "en")
    assert controller.city == "London"
    assert controller.bundle.locale == "en"
    # Выбор пользователя сохранён, хотя ответ пришёл от запроса смены языка
    assert preferences.data[CITY_PREFERENCE_KEY] == "London"
    assert controller.loading is False

    gate.set()
    assert await pending is False
    assert controller.bundle.locale == "en"


async def test_change_locale_during_initialize_does_not_persist():
    client = FakeWeatherClient()
    preferences = MemoryPreferences({CITY_PREFERENCE_KEY: "London"})
    gate = asyncio.Event()
    client.gates[("London", "fr")] = gate
    controller = make_controller(client, preferences)

    pending = asyncio.create_task(controller.initialize())
    await asyncio.sleep(0.01)
    await controller.change_locale("en")

    assert client.forecast_calls[-1] == ("London", 7, "en")
    assert preferences.set_calls == []

    gate.set()
    await pending


class GatedPreferences(MemoryPreferences):
    """Запись настройки ждёт, пока тест не откроет release."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def set(self, key, value):
        await self.release.wait()
        await super().set(key, value)


async def test_loading_event_not_cleared_when_newer_request_started_during_save():
    client = FakeWeatherClient()
    client.gates["Paris"] = asyncio.Event()
    preferences = GatedPreferences()
    controller = make_controller(client, preferences)
    loading_events = []

    async def on_loading(event):
        loading_events.append(event["loading"])

    controller.events.subscribe_async(LOADING_CHANGED, on_loading)

    first = asyncio.create_task(controller.select_city("London"))
    await asyncio.sleep(0.01)  # прогноз получен, город сохраняется
    second = asyncio.create_task(controller.select_city("Paris"))
    await asyncio.sleep(0.01)

    preferences.release.set()
    assert await first is True
    assert controller.loading is True
    assert loading_events == [True, True]

    client.gates["Paris"].set()
    assert await second is True
    assert controller.loading is False
    assert loading_events == [True, True, False]
    assert preferences.data[CITY_PREFERENCE_KEY] == "Paris"
