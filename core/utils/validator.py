# core/utils/validator.py
import html
import re

from config.bot_config import SUPPORTED_LOCALES

MAX_QUERY_LENGTH = 100


def sanitize_user_input(text: str) -> str:
    """Санитизация пользовательского ввода (строка поиска города)."""
    if not isinstance(text, str):
        raise ValueError("Input must be a string")
    text = html.unescape(text.strip())
    # Разрешаем буквы любых алфавитов, цифры, пробелы и знаки из названий городов
    text = re.sub(r"[^\w\s,\.\-'()]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text[:MAX_QUERY_LENGTH]  # ограничение длины


def validate_locale(locale: str) -> str:
    """Проверяет, что код языка входит в поддерживаемый набор. Возвращает его в нижнем регистре."""
    if not isinstance(locale, str) or locale.strip().lower() not in SUPPORTED_LOCALES:
        raise ValueError(f"Unsupported locale: {locale!r}. Expected one of {SUPPORTED_LOCALES}")
    return locale.strip().lower()
