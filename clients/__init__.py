"""
Клиенты для внешних API.

Содержит:
- gemini.py: GeminiClient для генерации текста через Gemini API
- telegram.py: TelegramPlatform поверх aiogram (getUpdates, отправка, опросы)
"""

from .gemini import GeminiClient
from .telegram import TelegramPlatform, SentPoll, PlatformError, DeliveryConflict

__all__ = [
    'GeminiClient',
    'TelegramPlatform',
    'SentPoll',
    'PlatformError',
    'DeliveryConflict',
]
