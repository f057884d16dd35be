# -*- coding: utf-8 -*-
"""
Шина событий (Event Bus) между контроллерами экрана и слоем отображения.

Архитектурный принцип:
- Производители (контроллеры поиска и прогноза) -> публикуют события
- Потребители (бот, тесты) -> подписываются на события
- event_bus.py НЕ импортирует bot.py и scripts/: зависимости только в одну сторону

У каждого экрана своя шина: глобальных реестров нет.

Использование:

bus = EventBus()

async def on_forecast(event):
    await bot.send_message(chat_id, render(event["bundle"]))

bus.subscribe_async(FORECAST_UPDATED, on_forecast)
await bus.emit_event(FORECAST_UPDATED, {"bundle": bundle})
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List

# Настройка логгера
logger = logging.getLogger("event_bus")

# Типы событий экрана
LOADING_CHANGED = "loading_changed"
FORECAST_UPDATED = "forecast_updated"
FORECAST_FAILED = "forecast_failed"
CANDIDATES_UPDATED = "candidates_updated"
SEARCH_VISIBILITY_CHANGED = "search_visibility_changed"
LOCALE_CHANGED = "locale_changed"

# Типы обработчиков
SyncHandler = Callable[[Dict[str, Any]], None]
AsyncHandler = Callable[[Dict[str, Any]], Awaitable[None]]


class EventBus:
    """Реестр обработчиков одного экрана."""

    def __init__(self):
        self._sync_handlers: Dict[str, List[SyncHandler]] = {}
        self._async_handlers: Dict[str, List[AsyncHandler]] = {}

    def subscribe(self, event_type: str, handler: SyncHandler) -> None:
        """
        Подписка на событие с синхронным обработчиком.

        Args:
            event_type (str): Тип события (например, "forecast_updated")
            handler (callable): Функция, принимающая dict с данными события
        """
        self._sync_handlers.setdefault(event_type, []).append(handler)
        logger.debug("Зарегистрирован синхронный обработчик для события: %s", event_type)

    def subscribe_async(self, event_type: str, handler: AsyncHandler) -> None:
        """
        Подписка на событие с асинхронным обработчиком.

        Args:
            event_type (str): Тип события (например, "candidates_updated")
            handler (callable): Асинхронная функция, принимающая dict с данными события
        """
        if handler is None:
            logger.warning(f"⚠️ Попытка подписаться на событие {event_type} с handler=None. Игнорируем.")
            return
        self._async_handlers.setdefault(event_type, []).append(handler)
        logger.debug("Зарегистрирован асинхронный обработчик для события: %s", event_type)

    def unsubscribe_async(self, event_type: str, handler: AsyncHandler) -> None:
        """Отписка от события."""
        try:
            self._async_handlers.get(event_type, []).remove(handler)
            logger.debug("Обработчик удалён для события: %s", event_type)
        except ValueError:
            logger.warning("Обработчик не найден для события: %s", event_type)

    async def emit_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
        """
        Асинхронная публикация события.

        Вызывает все зарегистрированные обработчики (синхронные и асинхронные).
        Ошибки в обработчиках логируются, но не прерывают выполнение:
        сломанный слой отображения не должен ломать контроллер.
        """
        logger.debug("Публикация события: %s, данные: %s", event_type, event_data)

        # Синхронные обработчики: в потоке executor'а, чтобы не блокировать event loop
        for handler in list(self._sync_handlers.get(event_type, [])):
            try:
                await asyncio.get_running_loop().run_in_executor(None, handler, event_data)
            except Exception as e:
                logger.error("Ошибка в синхронном обработчике события %s: %s", event_type, e, exc_info=True)

        for handler in list(self._async_handlers.get(event_type, [])):
            try:
                await handler(event_data)
            except Exception as e:
                logger.error("Ошибка в асинхронном обработчике события %s: %s", event_type, e, exc_info=True)

    def clear_all_handlers(self) -> None:
        """Очищает все зарегистрированные обработчики. Используется в тестах."""
        self._sync_handlers.clear()
        self._async_handlers.clear()
        logger.info("Все обработчики событий очищены.")
