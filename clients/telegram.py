"""
Клиент Telegram Bot API поверх aiogram.

TelegramPlatform даёт циклу обновлений и рассылке ровно то, что им нужно:
- identify: getMe (id и username бота)
- fetch_updates: getUpdates с offset, long polling и списком типов
- send_message / send_poll
- clear_pending_subscription: deleteWebhook (разрешение конфликта)

Ошибки aiogram/aiohttp переводятся в два типа:
- DeliveryConflict: другой процесс уже читает getUpdates этим токеном
- PlatformError: всё остальное (сеть, таймаут, ответ API с ошибкой)
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence

import aiohttp
from aiogram import Bot
from aiogram.exceptions import AiogramError, TelegramConflictError
from aiogram.types import BotCommand, ReplyParameters, Update, User

from config import get_logger, LONG_POLL_TIMEOUT, SEND_TIMEOUT

logger = get_logger(__name__)

# запас сверх long polling, чтобы HTTP-таймаут не срабатывал раньше Telegram
_LONG_POLL_MARGIN = 10


class PlatformError(Exception):
    """Ошибка обращения к Telegram (временная)."""
    pass


class DeliveryConflict(PlatformError):
    """Конфликт: обновления этого бота уже получает другой потребитель."""
    pass


@dataclass(frozen=True)
class SentPoll:
    message_id: int
    poll_id: str


class TelegramPlatform:
    """Обёртка над aiogram.Bot с явными таймаутами и единым типом ошибок"""

    def __init__(self, bot: Bot, send_timeout: int = SEND_TIMEOUT):
        self.bot = bot
        self.send_timeout = send_timeout
        self.bot_id: Optional[int] = None
        self.username: str = ""

    async def _call(self, method: str, coro):
        try:
            return await coro
        except TelegramConflictError as e:
            raise DeliveryConflict(str(e)) from e
        except (AiogramError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise PlatformError(f"{method}: {e}") from e

    async def identify(self) -> User:
        """getMe: запоминает id и username бота"""
        me = await self._call("getMe", self.bot.get_me(request_timeout=self.send_timeout))
        self.bot_id = me.id
        self.username = me.username or ""
        logger.info(f"Authorized as @{self.username}")
        return me

    async def fetch_updates(
        self,
        offset: int,
        timeout: int = LONG_POLL_TIMEOUT,
        allowed_types: Optional[Sequence[str]] = None,
    ) -> List[Update]:
        return await self._call(
            "getUpdates",
            self.bot.get_updates(
                offset=offset,
                timeout=timeout,
                allowed_updates=list(allowed_types) if allowed_types else None,
                request_timeout=timeout + _LONG_POLL_MARGIN,
            ),
        )

    async def send_message(self, chat_id: int, text: str, reply_to: Optional[int] = None) -> int:
        """Отправляет текст, возвращает message_id"""
        reply_parameters = None
        if reply_to is not None:
            reply_parameters = ReplyParameters(message_id=reply_to, allow_sending_without_reply=True)
        message = await self._call(
            "sendMessage",
            self.bot.send_message(
                chat_id=chat_id,
                text=text,
                reply_parameters=reply_parameters,
                request_timeout=self.send_timeout,
            ),
        )
        return message.message_id

    async def send_poll(self, chat_id: int, question: str, choices: Sequence[str]) -> SentPoll:
        """Отправляет неанонимный опрос с одним ответом"""
        message = await self._call(
            "sendPoll",
            self.bot.send_poll(
                chat_id=chat_id,
                question=question,
                options=list(choices),
                is_anonymous=False,
                allows_multiple_answers=False,
                request_timeout=self.send_timeout,
            ),
        )
        if message.poll is None:
            raise PlatformError(f"sendPoll: no poll in response for chat {chat_id}")
        return SentPoll(message_id=message.message_id, poll_id=message.poll.id)

    async def clear_pending_subscription(self) -> None:
        """deleteWebhook без сброса накопившихся обновлений"""
        await self._call(
            "deleteWebhook",
            self.bot.delete_webhook(drop_pending_updates=False, request_timeout=self.send_timeout),
        )

    async def set_commands(self, commands: List[BotCommand]) -> None:
        await self._call(
            "setMyCommands",
            self.bot.set_my_commands(commands, request_timeout=self.send_timeout),
        )
