# -*- coding: utf-8 -*-
"""
Конфигурация путей к локальному хранилищу.
Хранилище одно: SQLite-файл с сохранёнными настройками экрана (последний город).
"""

from pathlib import Path

# === Корень проекта ===
PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# === Папка данных ===
DATA_DIR = PROJECT_ROOT / "data"

# === ХРАНИЛИЩЕ НАСТРОЕК: последний выбранный город ===
PREFERENCES_DB_PATH = DATA_DIR / "preferences.db"

# === ПАРАМЕТРЫ ПОДКЛЮЧЕНИЯ ===
DB_CONNECTION_TIMEOUT = 30  # секунд

# === Ключи ===
CITY_PREFERENCE_KEY = "city"
DEFAULT_SCOPE = "default"
