"""
Цикл получения обновлений (long polling) и обработка событий.

UpdateLoop — свой цикл getUpdates вместо dp.start_polling:
1. getUpdates(offset, timeout=60, allowed_updates=[message, channel_post, poll_answer])
2. Успех → offset = max(update_id) + 1, события обрабатываются по порядку
3. Конфликт (второй потребитель того же токена) → deleteWebhook,
   экспоненциальная задержка 5s → 10s → ... → 60s, повтор с тем же offset
4. Прочие ошибки → 3 секунды и повтор с тем же offset

EventHandler разбирает события:
- ответ на опрос → раскрытие правильного ответа (один раз)
- команда → CommandRouter
- упоминание / ответ боту → ответ Gemini
- обычное сообщение → история чата
"""

import asyncio
from typing import Optional

from config import (
    get_logger,
    ALLOWED_UPDATES,
    CHAT_TIMEOUT,
    CONFLICT_BACKOFF_CEILING,
    CONFLICT_BACKOFF_MULTIPLIER,
    CONFLICT_BACKOFF_SEED,
    DEFAULT_LANGUAGE,
    LONG_POLL_TIMEOUT,
    LOOP_PAUSE,
    TRANSIENT_RETRY_DELAY,
)
from clients.telegram import DeliveryConflict, PlatformError
from core.backoff import Backoff, Sleep
from core.events import (
    ChatMessageEvent,
    CommandEvent,
    InboundEvent,
    PollAnswerEvent,
    QueryEvent,
    parse_update,
)
from core.history import ChatHistory, HistoryRecord
from core.registry import PendingPoll, PollRegistry
from locales import t
from .commands import CommandRouter
from .prompts import chat_prompt
from .replies import send_chunked

logger = get_logger(__name__)


def reveal_text(pending: PendingPoll, lang: str = DEFAULT_LANGUAGE) -> str:
    """Сообщение с правильным ответом (вариант нумеруется с 1)"""
    return t("quiz.reveal", lang, n=pending.correct_index + 1, text=pending.correct_choice)


class EventHandler:
    """Обработка одного входящего события"""

    def __init__(
        self,
        platform,
        generator,
        registry: PollRegistry,
        commands: CommandRouter,
        history: ChatHistory,
        chat_timeout: float = CHAT_TIMEOUT,
    ):
        self.platform = platform
        self.generator = generator
        self.registry = registry
        self.commands = commands
        self.history = history
        self.chat_timeout = chat_timeout

    async def dispatch(self, event: InboundEvent) -> None:
        if isinstance(event, PollAnswerEvent):
            await self.on_poll_answer(event)
        elif isinstance(event, CommandEvent):
            await self.commands.handle(event)
        elif isinstance(event, QueryEvent):
            await self.on_query(event)
        elif isinstance(event, ChatMessageEvent):
            self.on_chat_message(event)
        else:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")

    async def on_poll_answer(self, event: PollAnswerEvent) -> None:
        # pop до отправки: второй ответ на тот же опрос ничего не найдёт
        pending = await self.registry.pop(event.poll_id)
        if pending is None:
            return
        await self.platform.send_message(pending.chat_id, reveal_text(pending), reply_to=pending.message_id)
        logger.info(f"Revealed answer for poll {event.poll_id} in chat {pending.chat_id}")

    async def on_query(self, event: QueryEvent) -> None:
        self.history.append(HistoryRecord(
            chat_id=event.chat_id,
            sender=str(event.sender_id or "channel"),
            text=event.text,
        ))

        response = await self.generator.generate(
            chat_prompt(event.question, event.reply_text),
            timeout=self.chat_timeout,
        )
        if not response:
            response = t("errors.generation", event.language)
        await send_chunked(self.platform, event.chat_id, response, reply_to=event.message_id)

    def on_chat_message(self, event: ChatMessageEvent) -> None:
        self.history.append(HistoryRecord(
            chat_id=event.chat_id,
            sender=event.sender_name or str(event.sender_id),
            text=event.text,
        ))


class UpdateLoop:
    """Long polling getUpdates с обработкой конфликтов"""

    def __init__(
        self,
        platform,
        handler: EventHandler,
        backoff: Optional[Backoff] = None,
        poll_timeout: int = LONG_POLL_TIMEOUT,
        retry_delay: float = TRANSIENT_RETRY_DELAY,
        pause: float = LOOP_PAUSE,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Args:
            platform: TelegramPlatform
            handler: обработчик событий
            backoff: задержки при конфликте (по умолчанию 5s x2 до 60s)
            poll_timeout: long polling на стороне Telegram (секунды)
            retry_delay: задержка после прочих ошибок
            pause: пауза между итерациями
            sleep: функция ожидания (подменяется в тестах)
        """
        self.platform = platform
        self.handler = handler
        self.backoff = backoff or Backoff(
            seed=CONFLICT_BACKOFF_SEED,
            multiplier=CONFLICT_BACKOFF_MULTIPLIER,
            ceiling=CONFLICT_BACKOFF_CEILING,
        )
        self.poll_timeout = poll_timeout
        self.retry_delay = retry_delay
        self.pause = pause
        self._sleep = sleep
        self.offset = 0
        self._running = False

    async def run(self) -> None:
        """Работает до stop() или отмены задачи"""
        self._running = True
        logger.info("Update loop started")
        while self._running:
            await self.poll_once()
            await self._sleep(self.pause)
        logger.info("Update loop stopped")

    def stop(self) -> None:
        self._running = False

    async def poll_once(self) -> int:
        """Одна итерация: получить пачку и обработать

        Returns:
            Количество полученных обновлений (0 при ошибке)
        """
        try:
            updates = await self.platform.fetch_updates(
                self.offset, timeout=self.poll_timeout, allowed_types=ALLOWED_UPDATES
            )
        except DeliveryConflict as e:
            await self._on_conflict(e)
            return 0
        except PlatformError as e:
            logger.error(f"Error getting updates: {e}")
            await self._sleep(self.retry_delay)
            return 0

        self.backoff.reset()
        if not updates:
            return 0

        self.offset = max(update.update_id for update in updates) + 1

        for update in updates:
            await self._process(update)
        return len(updates)

    async def _on_conflict(self, error: DeliveryConflict) -> None:
        delay = self.backoff.next_delay()
        logger.warning(f"Conflict detected: {error}")
        try:
            await self.platform.clear_pending_subscription()
        except PlatformError as e:
            logger.error(f"Failed to clear webhook: {e}")
        logger.warning(f"Waiting {delay:.0f}s before retrying...")
        await self._sleep(delay)

    async def _process(self, update) -> None:
        try:
            event = parse_update(update, self.platform.bot_id, self.platform.username)
            if event is not None:
                await self.handler.dispatch(event)
        except Exception:
            logger.exception(f"Failed to handle update {update.update_id}")
