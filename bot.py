"""
ChatBuddy — Telegram-бот: ответы Gemini на упоминания и ежечасные квизы по английскому.

Запуск: python bot.py (или команда chatbuddy после pip install)
Нужны переменные окружения TELEGRAM_BOT_TOKEN и GEMINI_API_KEY (можно в .env).
"""

import asyncio
import sys

from aiogram import Bot

from config import (
    get_logger,
    validate_env,
    BOT_TOKEN,
    GEMINI_MODEL,
    STARTUP_RETRY_ATTEMPTS,
    STARTUP_BACKOFF_SEED,
    STARTUP_BACKOFF_CEILING,
    STARTUP_BACKOFF_JITTER,
)
from clients import GeminiClient, TelegramPlatform, PlatformError
from core.backoff import Backoff, retry_async
from engines import build_components, get_commands_list

logger = get_logger(__name__)


async def main():
    bot = Bot(token=BOT_TOKEN)
    platform = TelegramPlatform(bot)

    try:
        await retry_async(
            platform.identify,
            attempts=STARTUP_RETRY_ATTEMPTS,
            backoff=Backoff(
                seed=STARTUP_BACKOFF_SEED,
                ceiling=STARTUP_BACKOFF_CEILING,
                jitter=STARTUP_BACKOFF_JITTER,
            ),
            description="Telegram getMe",
        )

        # Меню команд — не критично для работы
        try:
            await platform.set_commands(get_commands_list())
        except PlatformError as e:
            logger.warning(f"Failed to set bot commands: {e}")

        components = build_components(platform, GeminiClient())

        # Запуск планировщика
        components.scheduler.start()
        logger.info(f"🚀 Bot started (model: {GEMINI_MODEL}), hourly quiz scheduled")

        try:
            await components.loop.run()
        finally:
            components.scheduler.shutdown(wait=False)
    finally:
        await bot.session.close()


def run():
    try:
        validate_env()
    except ValueError as e:
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped")


if __name__ == "__main__":
    run()
