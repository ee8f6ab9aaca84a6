"""
Настройки бота: токены, таймауты, интервалы.

Все значения читаются из переменных окружения один раз при импорте.
Если в рабочей папке есть .env — он загружается первым (локальная разработка).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# ============= .ENV =============

_ENV_FILE = Path.cwd() / ".env"

if _ENV_FILE.exists():
    try:
        load_dotenv(_ENV_FILE)
    except Exception as e:
        logging.getLogger(__name__).warning(f"Error loading .env file: {e}")


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} должен быть целым числом, получено: {value!r}")


# ============= ТОКЕНЫ =============

BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models"

REQUIRED_ENV = ("TELEGRAM_BOT_TOKEN", "GEMINI_API_KEY")


def validate_env() -> None:
    """Проверяет обязательные переменные окружения

    Raises:
        ValueError: если переменная не задана
    """
    for name in REQUIRED_ENV:
        if not os.getenv(name):
            raise ValueError(f"missing required environment variable: {name}")


# ============= ЛОГИРОВАНИЕ =============

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def get_logger(name: str) -> logging.Logger:
    """Логгер модуля"""
    return logging.getLogger(name)


# ============= ЯЗЫК =============

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")

# ============= ПОЛУЧЕНИЕ ОБНОВЛЕНИЙ =============

LONG_POLL_TIMEOUT = 60  # секунд ожидания на стороне Telegram
ALLOWED_UPDATES = ["message", "channel_post", "poll_answer"]
LOOP_PAUSE = 0.1  # пауза между итерациями, чтобы не крутить CPU

# Конфликт (второй getUpdates с тем же токеном): 5s → 10s → ... → 60s
CONFLICT_BACKOFF_SEED = 5.0
CONFLICT_BACKOFF_MULTIPLIER = 2.0
CONFLICT_BACKOFF_CEILING = 60.0

# Прочие ошибки сети/API
TRANSIENT_RETRY_DELAY = 3.0

# Подключение при старте (getMe)
STARTUP_RETRY_ATTEMPTS = 5
STARTUP_BACKOFF_SEED = 1.0
STARTUP_BACKOFF_CEILING = 30.0
STARTUP_BACKOFF_JITTER = 0.2

# ============= ТАЙМАУТЫ (секунды) =============

QUIZ_TIMEOUT = 30
CHAT_TIMEOUT = 60
SUMMARY_TIMEOUT = 90
SEND_TIMEOUT = 30

# ============= СООБЩЕНИЯ =============

MESSAGE_CHUNK_SIZE = 4096

# ============= КВИЗЫ =============

QUIZ_CHOICES = 4
POLL_TTL_HOURS = _int_env("POLL_TTL_HOURS", 24)  # 0 — без вытеснения

# ============= ИСТОРИЯ ЧАТА =============

HISTORY_LIMIT = _int_env("HISTORY_LIMIT", 200)
SUMMARY_MESSAGES = _int_env("SUMMARY_MESSAGES", 50)
