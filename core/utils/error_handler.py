# -*- coding: utf-8 -*-
"""
Утилита для централизованной обработки ошибок.
"""

import logging
from typing import Optional

logger = logging.getLogger("error_handler")


def _format_context(context: Optional[dict]) -> str:
    return f" | Контекст: {context}" if context else ""


def log_and_raise(message: str, exception: Exception, context: Optional[dict] = None):
    """
    Логирует ошибку и выбрасывает её дальше.

    Args:
        message (str): Пользовательское сообщение
        exception (Exception): Исключение, которое обрабатывается
        context (dict): Дополнительный контекст (например, city, locale)
    """
    logger.error(f"{message}{_format_context(context)} | Ошибка: {exception!r}", exc_info=exception)
    raise exception


def log_exception(exception: Exception, message: str = "Необработанное исключение", context: Optional[dict] = None):
    """
    Просто логирует исключение без выбрасывания.

    Args:
        exception (Exception): Исключение
        message (str): Описание
        context (dict): Контекст (город, язык, запрос)
    """
    logger.error(f"{message}{_format_context(context)} | Ошибка: {exception!r}", exc_info=exception)
