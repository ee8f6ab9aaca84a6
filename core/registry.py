"""
Хранилища состояния в памяти: активные опросы и подписанные чаты.

PollRegistry — poll_id → PendingPoll (что нужно, чтобы раскрыть ответ).
DestinationSet — чаты, в которые уходит ежечасный квиз.

Оба хранилища читаются и меняются из двух мест одновременно:
цикла получения обновлений и задачи планировщика. У каждого свой
asyncio.Lock; общий замок на оба не используется.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from config import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PendingPoll:
    """Отправленный опрос, ответ на который ещё не раскрыт"""
    chat_id: int
    message_id: int
    correct_index: int
    choices: Tuple[str, ...]
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if not 0 <= self.correct_index < len(self.choices):
            raise ValueError(
                f"correct_index {self.correct_index} out of range for {len(self.choices)} choices"
            )

    @property
    def correct_choice(self) -> str:
        return self.choices[self.correct_index]


class PollRegistry:
    """
    Реестр активных опросов.

    Ключ — poll_id, который Telegram выдаёт только после успешной отправки,
    поэтому запись появляется строго после send_poll.

    Без TTL неотвеченные опросы живут до перезапуска процесса.
    С TTL устаревшие записи вытесняются при add() и prune().
    """

    def __init__(self, ttl: Optional[timedelta] = None, clock: Callable[[], datetime] = utcnow):
        self.ttl = ttl
        self._clock = clock
        self._polls: Dict[str, PendingPoll] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._polls)

    async def add(self, poll_id: str, pending: PendingPoll) -> None:
        async with self._lock:
            self._evict_expired()
            self._polls[poll_id] = pending
        logger.debug(f"Registered poll {poll_id} for chat {pending.chat_id}")

    async def get(self, poll_id: str) -> Optional[PendingPoll]:
        async with self._lock:
            return self._polls.get(poll_id)

    async def pop(self, poll_id: str) -> Optional[PendingPoll]:
        """Атомарно находит и удаляет запись. Повторный вызов вернёт None."""
        async with self._lock:
            return self._polls.pop(poll_id, None)

    async def prune(self) -> int:
        """Удаляет устаревшие записи, возвращает их количество"""
        async with self._lock:
            return self._evict_expired()

    def _evict_expired(self) -> int:
        # вызывается под self._lock
        if not self.ttl:
            return 0
        cutoff = self._clock() - self.ttl
        expired = [poll_id for poll_id, p in self._polls.items() if p.created_at < cutoff]
        for poll_id in expired:
            del self._polls[poll_id]
        if expired:
            logger.info(f"Evicted {len(expired)} unanswered polls older than {self.ttl}")
        return len(expired)


class DestinationSet:
    """
    Чаты, подписанные на ежечасный квиз.

    Присутствие в наборе = включено, отсутствие = выключено.
    Порядок — порядок подписки.
    """

    def __init__(self):
        self._chats: Dict[int, None] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._chats)

    async def enable(self, chat_id: int) -> bool:
        """Возвращает True, если чат добавлен впервые"""
        async with self._lock:
            if chat_id in self._chats:
                return False
            self._chats[chat_id] = None
        logger.info(f"Quizzes activated in chat {chat_id}")
        return True

    async def disable(self, chat_id: int) -> bool:
        """Возвращает True, если чат был подписан"""
        async with self._lock:
            if chat_id not in self._chats:
                return False
            del self._chats[chat_id]
        logger.info(f"Quizzes deactivated in chat {chat_id}")
        return True

    async def contains(self, chat_id: int) -> bool:
        async with self._lock:
            return chat_id in self._chats

    async def snapshot(self) -> List[int]:
        """Копия набора на текущий момент (для рассылки)"""
        async with self._lock:
            return list(self._chats)
