"""
История сообщений чата для /summary.

Хранится только в памяти и ограничена limit записями на чат:
после перезапуска процесса история пуста.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Dict, List


@dataclass(frozen=True)
class HistoryRecord:
    chat_id: int
    sender: str
    text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ChatHistory:
    """Последние сообщения каждого чата"""

    def __init__(self, limit: int = 200):
        self.limit = limit
        self._records: Dict[int, Deque[HistoryRecord]] = defaultdict(lambda: deque(maxlen=self.limit))

    def append(self, record: HistoryRecord) -> None:
        self._records[record.chat_id].append(record)

    def query(self, chat_id: int, limit: int = 50) -> List[HistoryRecord]:
        """Последние limit сообщений чата, от старых к новым"""
        records = self._records.get(chat_id)
        if not records or limit <= 0:
            return []
        return list(records)[-limit:]
