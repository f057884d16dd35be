# process_manager.py
# -*- coding: utf-8 -*-
"""
Глобальный координатор зависимостей.
Инициализирует конфигурацию, клиент WeatherAPI и хранилище настроек один раз
и создаёт экраны погоды поверх них.
"""

import logging
from typing import Dict, Optional

from config.bot_config import BotConfig
from config.db_config import PREFERENCES_DB_PATH
from config.logging_config import setup_logging
from core.db.preference_db import PreferenceDB
from core.utils.api_client import WeatherAPIClient, create_client
from scripts.weather.weather_screen import WeatherScreen

logger = logging.getLogger("process_manager")


class ProcessManager:
    """
    Единый контекст приложения. Все зависимости инициализируются здесь.
    """

    def __init__(self):
        self._initialized = False
        # Конфигурация
        self.config: Optional[BotConfig] = None
        # Хранилище настроек
        self.preference_db: Optional[PreferenceDB] = None
        # Клиент погоды
        self.api_client: Optional[WeatherAPIClient] = None
        # Открытые экраны по scope (например, chat_id)
        self.screens: Dict[str, WeatherScreen] = {}

    def initialize_sync(self, config: Optional[BotConfig] = None, db_path=None):
        """Синхронная инициализация всех компонентов."""
        if self._initialized:
            return

        # 1. Загрузка конфигурации
        self.config = config or BotConfig.load()
        setup_logging(self.config.log_level)

        # 2. Хранилище настроек
        self.preference_db = PreferenceDB(db_path=db_path or PREFERENCES_DB_PATH)

        # 3. Клиент WeatherAPI
        if not self.config.weather_api_key:
            logger.warning("⚠️ WEATHER_API_KEY не задан: запросы к погоде будут падать")
        self.api_client = create_client(self.config.weather_api_key, timeout=self.config.api_timeout_sec)

        self._initialized = True
        logger.info("✅ ProcessManager: initialized (preferences + weather api ready)")

    def get_screen(self, scope: str) -> WeatherScreen:
        """Возвращает экран для scope, создавая его при первом обращении."""
        if not self._initialized:
            raise RuntimeError("ProcessManager не инициализирован: вызовите initialize_sync()")

        screen = self.screens.get(scope)
        if screen is None:
            screen = WeatherScreen(
                self.api_client,
                self.preference_db.for_scope(scope),
                default_city=self.config.default_city,
                locale=self.config.default_locale,
                forecast_days=self.config.forecast_days,
                debounce_sec=self.config.search_debounce_sec
            )
            self.screens[scope] = screen
            logger.info(f"🆕 Создан экран погоды для scope={scope}")
        return screen

    def shutdown_sync(self):
        """Синхронное завершение (закрытие экранов)."""
        if not self._initialized:
            return

        for screen in self.screens.values():
            screen.close()
        self.screens.clear()
        logger.info("🛑 ProcessManager: shut down")


# Глобальный экземпляр: точка доступа для бота
process_manager = ProcessManager()
