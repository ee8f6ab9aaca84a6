"""
Модуль конфигурации бота.

Содержит:
- settings.py: все константы, токены, настройки
"""

from .settings import (
    # Токены
    BOT_TOKEN,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GEMINI_URL,
    validate_env,

    # Логирование
    get_logger,

    # Язык
    DEFAULT_LANGUAGE,

    # Получение обновлений
    LONG_POLL_TIMEOUT,
    ALLOWED_UPDATES,
    LOOP_PAUSE,
    CONFLICT_BACKOFF_SEED,
    CONFLICT_BACKOFF_MULTIPLIER,
    CONFLICT_BACKOFF_CEILING,
    TRANSIENT_RETRY_DELAY,
    STARTUP_RETRY_ATTEMPTS,
    STARTUP_BACKOFF_SEED,
    STARTUP_BACKOFF_CEILING,
    STARTUP_BACKOFF_JITTER,

    # Таймауты
    QUIZ_TIMEOUT,
    CHAT_TIMEOUT,
    SUMMARY_TIMEOUT,
    SEND_TIMEOUT,

    # Сообщения и квизы
    MESSAGE_CHUNK_SIZE,
    QUIZ_CHOICES,
    POLL_TTL_HOURS,

    # История
    HISTORY_LIMIT,
    SUMMARY_MESSAGES,
)

__all__ = [
    'BOT_TOKEN',
    'GEMINI_API_KEY',
    'GEMINI_MODEL',
    'GEMINI_URL',
    'validate_env',
    'get_logger',
    'DEFAULT_LANGUAGE',
    'LONG_POLL_TIMEOUT',
    'ALLOWED_UPDATES',
    'LOOP_PAUSE',
    'CONFLICT_BACKOFF_SEED',
    'CONFLICT_BACKOFF_MULTIPLIER',
    'CONFLICT_BACKOFF_CEILING',
    'TRANSIENT_RETRY_DELAY',
    'STARTUP_RETRY_ATTEMPTS',
    'STARTUP_BACKOFF_SEED',
    'STARTUP_BACKOFF_CEILING',
    'STARTUP_BACKOFF_JITTER',
    'QUIZ_TIMEOUT',
    'CHAT_TIMEOUT',
    'SUMMARY_TIMEOUT',
    'SEND_TIMEOUT',
    'MESSAGE_CHUNK_SIZE',
    'QUIZ_CHOICES',
    'POLL_TTL_HOURS',
    'HISTORY_LIMIT',
    'SUMMARY_MESSAGES',
]
