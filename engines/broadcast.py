"""
Рассылка квизов.

QuizBroadcaster:
1. Генерирует один квиз (Gemini → extract_quiz)
2. Отправляет его опросом в каждый подписанный чат
3. Регистрирует каждый отправленный опрос в PollRegistry
   (у каждого чата свой poll_id, вопрос и варианты общие)

Ошибка отправки в один чат не прерывает рассылку в остальные.
tick() вызывается планировщиком в начале каждого часа (UTC).
"""

from dataclasses import dataclass
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import get_logger, QUIZ_TIMEOUT
from clients.telegram import PlatformError
from core.quiz import Quiz, QuizError, extract_quiz
from core.registry import DestinationSet, PendingPoll, PollRegistry
from .prompts import HOURLY_QUIZ_PROMPT, word_quiz_prompt

logger = get_logger(__name__)


class GenerationError(Exception):
    """Генеративная модель не вернула ответ (ошибка или таймаут)."""
    pass


@dataclass(frozen=True)
class BroadcastResult:
    sent: int = 0
    failed: int = 0


class QuizBroadcaster:
    """Генерация и рассылка квизов по подписанным чатам"""

    def __init__(
        self,
        platform,
        generator,
        destinations: DestinationSet,
        registry: PollRegistry,
        quiz_timeout: float = QUIZ_TIMEOUT,
    ):
        """
        Args:
            platform: TelegramPlatform (send_poll)
            generator: клиент с методом generate(prompt, timeout)
            destinations: подписанные чаты
            registry: реестр активных опросов
            quiz_timeout: таймаут генерации одного квиза
        """
        self.platform = platform
        self.generator = generator
        self.destinations = destinations
        self.registry = registry
        self.quiz_timeout = quiz_timeout

    async def generate_quiz(self, word: Optional[str] = None) -> Quiz:
        """Генерирует квиз (общий по лексике или по одному слову)

        Raises:
            GenerationError: модель не ответила
            QuizError: ответ модели не удалось разобрать
        """
        prompt = word_quiz_prompt(word) if word else HOURLY_QUIZ_PROMPT
        raw = await self.generator.generate(prompt, timeout=self.quiz_timeout)
        if not raw:
            raise GenerationError("quiz generation returned no text")
        try:
            return extract_quiz(raw)
        except QuizError as e:
            logger.warning(f"Quiz parse error: {e} - raw: {raw[:500]}")
            raise

    async def send_quiz(self, chat_id: int, quiz: Quiz) -> PendingPoll:
        """Отправляет квиз опросом и регистрирует его

        Raises:
            PlatformError: Telegram отклонил отправку (в реестр ничего не попадает)
        """
        sent = await self.platform.send_poll(chat_id, quiz.question, quiz.choices)
        pending = PendingPoll(
            chat_id=chat_id,
            message_id=sent.message_id,
            correct_index=quiz.correct_index,
            choices=quiz.choices,
        )
        await self.registry.add(sent.poll_id, pending)
        return pending

    async def broadcast(self) -> BroadcastResult:
        """Один квиз во все подписанные чаты

        Returns:
            Количество успешных и неудачных отправок

        Raises:
            GenerationError, QuizError: квиз не получен (ничего не отправлено)
        """
        chats = await self.destinations.snapshot()
        if not chats:
            return BroadcastResult()

        quiz = await self.generate_quiz()

        sent = failed = 0
        for chat_id in chats:
            try:
                await self.send_quiz(chat_id, quiz)
                sent += 1
            except PlatformError as e:
                failed += 1
                logger.error(f"failed to send poll to {chat_id}: {e}")
        return BroadcastResult(sent=sent, failed=failed)

    async def tick(self) -> None:
        """Задача планировщика: ежечасная рассылка"""
        evicted = await self.registry.prune()
        if evicted:
            logger.info(f"Pruned {evicted} expired polls")

        try:
            result = await self.broadcast()
        except GenerationError as e:
            logger.error(f"Quiz gen error, skipping this hour: {e}")
            return
        except QuizError as e:
            logger.error(f"Quiz rejected, skipping this hour: {e}")
            return

        if result.sent or result.failed:
            logger.info(f"Hourly quiz: sent={result.sent} failed={result.failed}")


def build_scheduler(broadcaster: QuizBroadcaster) -> AsyncIOScheduler:
    """Планировщик: квиз в начале каждого часа по UTC"""
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        broadcaster.tick,
        CronTrigger(minute=0, timezone="UTC"),
        id="hourly_quiz",
        max_instances=1,
        coalesce=True,
    )
    return scheduler
