"""
Обработка команд бота.

Команды:
- /start — приветствие
- /help — справка
- /activate, /deactivate — подписка чата на ежечасные квизы
- /quiz <слово> — квиз по слову только в этот чат
- /quiznow — внеочередная рассылка во все подписанные чаты
- /summary — пересказ последних сообщений чата

Неизвестная команда получает фиксированный ответ.
"""

from typing import Awaitable, Callable, Dict

from config import get_logger, SUMMARY_MESSAGES, SUMMARY_TIMEOUT
from clients.telegram import PlatformError
from core.events import CommandEvent
from core.history import ChatHistory
from core.quiz import QuizError, QuizValidationError
from core.registry import DestinationSet
from locales import t
from .broadcast import GenerationError, QuizBroadcaster
from .prompts import summary_prompt
from .replies import send_chunked

logger = get_logger(__name__)

Handler = Callable[[CommandEvent], Awaitable[None]]


def describe_quiz_error(error: QuizError, lang: str) -> str:
    """Список причин отказа квиза для пользователя"""
    if isinstance(error, QuizValidationError):
        reasons = [t(f"quiz.problems.{problem.value}", lang) for problem in error.problems]
    else:
        reasons = [t("quiz.problems.format", lang)]
    return t("quiz.failed", lang, reasons="\n".join(reasons))


class CommandRouter:
    """Маршрутизация команд по имени"""

    def __init__(
        self,
        platform,
        generator,
        destinations: DestinationSet,
        broadcaster: QuizBroadcaster,
        history: ChatHistory,
        summary_timeout: float = SUMMARY_TIMEOUT,
        summary_messages: int = SUMMARY_MESSAGES,
    ):
        self.platform = platform
        self.generator = generator
        self.destinations = destinations
        self.broadcaster = broadcaster
        self.history = history
        self.summary_timeout = summary_timeout
        self.summary_messages = summary_messages

        self.handlers: Dict[str, Handler] = {
            "start": self.cmd_start,
            "help": self.cmd_help,
            "activate": self.cmd_activate,
            "deactivate": self.cmd_deactivate,
            "quiz": self.cmd_quiz,
            "quiznow": self.cmd_quiznow,
            "summary": self.cmd_summary,
        }

    async def handle(self, event: CommandEvent) -> None:
        handler = self.handlers.get(event.command)
        if handler is None:
            logger.debug(f"Unknown command /{event.command} in chat {event.chat_id}")
            await self._say(event, t("commands.unknown", event.language))
            return
        await handler(event)

    async def _say(self, event: CommandEvent, text: str) -> None:
        await self.platform.send_message(event.chat_id, text)

    # --- Справка ---

    async def cmd_start(self, event: CommandEvent) -> None:
        await self._say(event, t("commands.start", event.language))

    async def cmd_help(self, event: CommandEvent) -> None:
        await self._say(event, t("commands.help", event.language, username=self.platform.username))

    # --- Подписка ---

    async def cmd_activate(self, event: CommandEvent) -> None:
        added = await self.destinations.enable(event.chat_id)
        key = "commands.activated" if added else "commands.already_active"
        await self._say(event, t(key, event.language))

    async def cmd_deactivate(self, event: CommandEvent) -> None:
        removed = await self.destinations.disable(event.chat_id)
        key = "commands.deactivated" if removed else "commands.not_active"
        await self._say(event, t(key, event.language))

    # --- Квизы ---

    async def cmd_quiz(self, event: CommandEvent) -> None:
        word = event.args.strip()
        if not word:
            await self._say(event, t("quiz.usage", event.language))
            return

        try:
            quiz = await self.broadcaster.generate_quiz(word)
        except GenerationError as e:
            logger.error(f"Quiz generation for '{word}' failed: {e}")
            await self._say(event, t("errors.generation", event.language))
            return
        except QuizError as e:
            await self._say(event, describe_quiz_error(e, event.language))
            return

        try:
            await self.broadcaster.send_quiz(event.chat_id, quiz)
        except PlatformError as e:
            logger.error(f"failed to send poll to {event.chat_id}: {e}")
            await self._say(event, t("quiz.send_failed", event.language))

    async def cmd_quiznow(self, event: CommandEvent) -> None:
        if not len(self.destinations):
            await self._say(event, t("broadcast.no_chats", event.language))
            return

        try:
            result = await self.broadcaster.broadcast()
        except GenerationError as e:
            logger.error(f"Broadcast generation failed: {e}")
            await self._say(event, t("errors.generation", event.language))
            return
        except QuizError as e:
            await self._say(event, describe_quiz_error(e, event.language))
            return

        logger.info(f"Manual broadcast from chat {event.chat_id}: sent={result.sent} failed={result.failed}")
        await self._say(event, t("broadcast.report", event.language, sent=result.sent, failed=result.failed))

    # --- История ---

    async def cmd_summary(self, event: CommandEvent) -> None:
        records = self.history.query(event.chat_id, self.summary_messages)
        if not records:
            await self._say(event, t("summary.empty", event.language))
            return

        summary = await self.generator.generate(summary_prompt(records), timeout=self.summary_timeout)
        if not summary:
            await self._say(event, t("errors.generation", event.language))
            return
        await send_chunked(self.platform, event.chat_id, summary, reply_to=event.message_id)
