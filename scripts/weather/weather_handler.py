# scripts/weather/weather_handler.py
# -*- coding: utf-8 -*-
"""
Слой отображения экрана погоды в Telegram.

Каждый чат: отдельный экран (scope = chat_id). Обработчики только
передают ввод контроллерам; всё, что показывается, приходит через шину событий.
"""
import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ChatAction, ParseMode
from telegram.ext import ContextTypes

from config.bot_config import SUPPORTED_LOCALES
from core.event_bus import (
    CANDIDATES_UPDATED,
    FORECAST_FAILED,
    FORECAST_UPDATED,
    LOADING_CHANGED,
    SEARCH_VISIBILITY_CHANGED,
)
from process_manager import process_manager
from scripts.weather._processes.formatter import format_candidates, format_forecast, ui_texts
from scripts.weather.weather_screen import WeatherScreen

logger = logging.getLogger("weather_handler")


def _forecast_keyboard(locale: str) -> InlineKeyboardMarkup:
    language_buttons = [
        InlineKeyboardButton(
            ("✅ " if code == locale else "") + ui_texts(code)["language_name"],
            callback_data=f"weather_lang:{code}"
        )
        for code in SUPPORTED_LOCALES
    ]
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(f"🔍 {ui_texts(locale)['search_placeholder']}", callback_data="weather_search")],
        language_buttons
    ])


def _candidates_keyboard(screen: WeatherScreen) -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(f"📍 {loc.label}"[:60], callback_data=f"weather_pick:{screen.search.candidates_version}:{index}")]
        for index, loc in enumerate(screen.search.candidates)
    ]
    return InlineKeyboardMarkup(buttons)


def _attach_renderers(screen: WeatherScreen, bot, chat_id: int) -> None:
    """Подписывает отрисовку чата на события экрана."""

    async def on_loading(event):
        if event["loading"]:
            await bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)

    async def on_forecast(event):
        await bot.send_message(
            chat_id=chat_id,
            text=format_forecast(event["bundle"], screen.locale),
            reply_markup=_forecast_keyboard(screen.locale),
            parse_mode=ParseMode.HTML
        )

    async def on_forecast_failed(event):
        # Показываем прежний снимок (или заглушку, если его нет)
        await bot.send_message(
            chat_id=chat_id,
            text=format_forecast(screen.forecast.bundle, screen.locale),
            reply_markup=_forecast_keyboard(screen.locale),
            parse_mode=ParseMode.HTML
        )

    async def on_candidates(event):
        # Кандидаты видны только при открытой строке поиска
        if not screen.search.show_search or not event["candidates"]:
            return
        await bot.send_message(
            chat_id=chat_id,
            text=format_candidates(event["candidates"], screen.locale),
            reply_markup=_candidates_keyboard(screen),
            parse_mode=ParseMode.HTML
        )

    async def on_search_visibility(event):
        if event["show_search"]:
            await bot.send_message(
                chat_id=chat_id,
                text=format_candidates([], screen.locale),
                parse_mode=ParseMode.HTML
            )

    screen.events.subscribe_async(LOADING_CHANGED, on_loading)
    screen.events.subscribe_async(FORECAST_UPDATED, on_forecast)
    screen.events.subscribe_async(FORECAST_FAILED, on_forecast_failed)
    screen.events.subscribe_async(CANDIDATES_UPDATED, on_candidates)
    screen.events.subscribe_async(SEARCH_VISIBILITY_CHANGED, on_search_visibility)


def _get_screen(update: Update, context: ContextTypes.DEFAULT_TYPE) -> WeatherScreen:
    chat_id = update.effective_chat.id
    screen = process_manager.get_screen(str(chat_id))
    if not context.chat_data.get("weather_renderers_attached"):
        _attach_renderers(screen, context.bot, chat_id)
        context.chat_data["weather_renderers_attached"] = True
    return screen


# === КОМАНДЫ ===
async def weather_start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/start: открывает экран: сохранённый город (или город по умолчанию)."""
    logger.info(f"👤 Чат {update.effective_chat.id}: открыт экран погоды")
    screen = _get_screen(update, context)
    await screen.mount()


async def weather_search_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/search: показывает/скрывает строку поиска."""
    screen = _get_screen(update, context)
    await screen.search.toggle_search()


async def weather_text_input(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обычный текст: это ввод в строку поиска (если она открыта)."""
    screen = _get_screen(update, context)
    if not screen.search.show_search:
        await screen.search.toggle_search()
    await screen.search.on_query_changed(update.message.text or "")


# === INLINE-КНОПКИ ===
async def weather_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    data = query.data or ""
    screen = _get_screen(update, context)
    logger.info(f"🖱️ Чат {update.effective_chat.id}: нажата кнопка '{data}'")

    if data == "weather_search":
        await screen.search.toggle_search()

    elif data.startswith("weather_pick:"):
        try:
            _, version, index = data.split(":")
            location = screen.search.candidate_at(int(version), int(index))
        except ValueError:
            location = None
        if location is None:
            # Кнопка из сообщения со старым списком кандидатов
            logger.warning(f"⚠️ Кандидат для '{data}' больше не доступен")
            return
        await screen.search.on_candidate_selected(location)

    elif data.startswith("weather_lang:"):
        locale = data.split(":", 1)[1]
        if locale in SUPPORTED_LOCALES:
            await screen.forecast.change_locale(locale)
