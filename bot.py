# bot.py
# -*- coding: utf-8 -*-
"""
Точка входа: экран погоды в Telegram.
"""
import logging

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from core.utils.error_handler import log_and_raise, log_exception
from process_manager import process_manager
from scripts.weather.weather_handler import (
    weather_callback,
    weather_search_command,
    weather_start,
    weather_text_input,
)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    context_info = {"update_id": update.update_id} if isinstance(update, Update) else None
    log_exception(context.error, "⚠️ Исключение при обработке", context_info)


def build_application() -> Application:
    """Создаёт приложение и регистрирует обработчики."""
    app = (
        Application.builder()
        .token(process_manager.config.telegram_token)
        .concurrent_updates(True)  # ввод продолжает приниматься, пока идёт запрос прогноза
        .build()
    )

    # 1. КОМАНДЫ
    app.add_handler(CommandHandler("start", weather_start))
    app.add_handler(CommandHandler("search", weather_search_command))

    # 2. ТЕКСТ: ввод в строку поиска
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, weather_text_input))

    # 3. INLINE-КНОПКИ экрана погоды
    app.add_handler(CallbackQueryHandler(weather_callback, pattern="^weather_"))

    # 4. ОБРАБОТЧИК ОШИБОК
    app.add_error_handler(error_handler)
    return app


# === Основная функция запуска ===
def main():
    # Инициализация
    process_manager.initialize_sync()
    logging.info("🚀 Запуск бота")
    if not process_manager.config.telegram_token:
        logging.critical("❌ TELEGRAM_BOT_TOKEN не задан")
        log_and_raise("Запуск невозможен", ValueError("TELEGRAM_BOT_TOKEN не задан в .env!"))

    app = build_application()
    print("🚀 Бот запущен. Используйте /start.")
    print("Нажмите Ctrl+C для остановки.")

    try:
        app.run_polling(drop_pending_updates=True)
    except KeyboardInterrupt:
        print("\n🛑 Остановка по запросу пользователя.")
    finally:
        process_manager.shutdown_sync()
        print("✅ Бот завершил работу.")


if __name__ == "__main__":
    main()
