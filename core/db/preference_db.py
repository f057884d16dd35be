# -*- coding: utf-8 -*-
"""
Хранилище настроек экрана: ключ -> строка.
Использует SQLite; синхронная работа с БД уходит в executor,
наружу отдаются асинхронные get/set.

Ошибки хранилища не фатальны: get возвращает None, set только логирует.
"""

import asyncio
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from config.db_config import DB_CONNECTION_TIMEOUT, DEFAULT_SCOPE, PREFERENCES_DB_PATH

logger = logging.getLogger("preference_db")


class PreferenceDB:
    """
    Key-value хранилище в одном SQLite-файле.
    scope отделяет настройки разных экранов (например, разных чатов).
    """

    def __init__(self, db_path: Path = None, scope: str = DEFAULT_SCOPE):
        self.db_path = Path(db_path or PREFERENCES_DB_PATH)
        self.scope = scope
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Создаёт новое подключение к БД (потокобезопасно)."""
        # check_same_thread=False безопасно, т.к. соединение локальное для метода
        conn = sqlite3.connect(
            self.db_path,
            timeout=DB_CONNECTION_TIMEOUT,
            check_same_thread=False
        )
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self):
        """Соединение на одну операцию: commit при успехе, закрытие всегда."""
        conn = self._get_connection()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        """Инициализирует таблицу при первом запуске."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._transaction() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS preferences (
                        scope TEXT NOT NULL,
                        key TEXT NOT NULL,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        PRIMARY KEY (scope, key)
                    )
                """)
        except (sqlite3.Error, OSError) as e:
            # Экран должен работать и без хранилища
            logger.error(f"❌ Не удалось инициализировать хранилище {self.db_path}: {e}")

    def for_scope(self, scope: str) -> "PreferenceDB":
        """Возвращает хранилище в том же файле, но с другой областью ключей."""
        return PreferenceDB(db_path=self.db_path, scope=scope)

    # === СИНХРОННЫЕ МЕТОДЫ ===
    def get_sync(self, key: str) -> Optional[str]:
        try:
            with self._transaction() as conn:
                row = conn.execute(
                    "SELECT value FROM preferences WHERE scope = ? AND key = ?",
                    (self.scope, key)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"❌ Ошибка чтения настройки '{key}' ({self.scope}): {e}")
            return None
        return row["value"] if row else None

    def set_sync(self, key: str, value: str) -> None:
        try:
            with self._transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO preferences (scope, key, value)
                    VALUES (?, ?, ?)
                    ON CONFLICT(scope, key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (self.scope, key, value)
                )
            logger.info(f"💾 Настройка '{key}' сохранена ({self.scope}): {value}")
        except sqlite3.Error as e:
            logger.error(f"❌ Ошибка записи настройки '{key}' ({self.scope}): {e}")

    # === АСИНХРОННЫЕ МЕТОДЫ ===
    async def get(self, key: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_sync, key)

    async def set(self, key: str, value: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.set_sync, key, value)
