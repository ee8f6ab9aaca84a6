"""
Ядро бота: общие компоненты.

Содержит:
- events.py: входящие события Telegram (команда, запрос, сообщение, ответ на опрос)
- quiz.py: Quiz и разбор квиза из ответа модели
- registry.py: PollRegistry и DestinationSet — состояние в памяти
- backoff.py: политика повторов с экспоненциальной задержкой
- history.py: история чата для /summary
- text.py: разбиение длинных сообщений
"""

from .events import (
    CommandEvent,
    QueryEvent,
    ChatMessageEvent,
    PollAnswerEvent,
    InboundEvent,
    parse_update,
    extract_command,
    is_addressed_to,
)

from .quiz import (
    Quiz,
    QuizProblem,
    QuizError,
    QuizFormatError,
    QuizValidationError,
    extract_quiz,
)

from .registry import PendingPoll, PollRegistry, DestinationSet
from .backoff import Backoff, retry_async
from .history import ChatHistory, HistoryRecord
from .text import split_text

__all__ = [
    # events
    'CommandEvent',
    'QueryEvent',
    'ChatMessageEvent',
    'PollAnswerEvent',
    'InboundEvent',
    'parse_update',
    'extract_command',
    'is_addressed_to',
    # quiz
    'Quiz',
    'QuizProblem',
    'QuizError',
    'QuizFormatError',
    'QuizValidationError',
    'extract_quiz',
    # registry
    'PendingPoll',
    'PollRegistry',
    'DestinationSet',
    # backoff
    'Backoff',
    'retry_async',
    # history
    'ChatHistory',
    'HistoryRecord',
    # text
    'split_text',
]
