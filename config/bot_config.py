# config/bot_config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv
load_dotenv()

# Языки, для которых есть тексты интерфейса и которые понимает WeatherAPI
SUPPORTED_LOCALES = ("en", "fr")


@dataclass
class BotConfig:
    telegram_token: str
    weather_api_key: str
    log_level: str = "INFO"
    default_city: str = "Bangui"
    default_locale: str = "fr"
    search_debounce_sec: float = 1.2
    forecast_days: int = 7
    api_timeout_sec: float = 12.0

    @classmethod
    def load(cls):
        return cls(
            telegram_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
            weather_api_key=os.getenv("WEATHER_API_KEY", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            default_city=os.getenv("DEFAULT_CITY", "Bangui"),
            default_locale=os.getenv("DEFAULT_LOCALE", "fr"),
            search_debounce_sec=float(os.getenv("SEARCH_DEBOUNCE_SEC", "1.2")),
            forecast_days=int(os.getenv("FORECAST_DAYS", "7")),
            api_timeout_sec=float(os.getenv("API_TIMEOUT_SEC", "12"))
        )
