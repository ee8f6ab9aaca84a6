"""
Подделки для тестов без Telegram и Gemini.

FakePlatform повторяет интерфейс TelegramPlatform, FakeGenerator — GeminiClient.
Функции *_update собирают настоящие aiogram Update.
"""

import re
from datetime import datetime, timezone

from aiogram.types import Chat, Message, MessageEntity, PollAnswer, Update, User

from clients.telegram import PlatformError, SentPoll

BOT_ID = 999
BOT_USERNAME = "ChatBuddyBot"
_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)
_COMMAND_TOKEN = re.compile(r"/[A-Za-z0-9_]+(?:@[A-Za-z0-9_]+)?")


class FakePlatform:
    """Записывает все отправки; fetch_updates отдаёт заранее заданные пачки"""

    def __init__(self, batches=None):
        self.bot_id = BOT_ID
        self.username = BOT_USERNAME
        self.batches = list(batches or [])
        self.fetch_offsets = []
        self.fetch_kwargs = []
        self.messages = []  # (chat_id, text, reply_to)
        self.polls = []     # (chat_id, question, choices)
        self.cleared = 0
        self.failing_chats = set()
        self._message_id = 100
        self._poll_id = 0

    async def fetch_updates(self, offset, timeout=60, allowed_types=None):
        self.fetch_offsets.append(offset)
        self.fetch_kwargs.append({"timeout": timeout, "allowed_types": list(allowed_types or [])})
        if not self.batches:
            return []
        item = self.batches.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def send_message(self, chat_id, text, reply_to=None):
        self._message_id += 1
        self.messages.append((chat_id, text, reply_to))
        return self._message_id

    async def send_poll(self, chat_id, question, choices):
        if chat_id in self.failing_chats:
            raise PlatformError(f"sendPoll: chat {chat_id} not found")
        self._message_id += 1
        self._poll_id += 1
        self.polls.append((chat_id, question, tuple(choices)))
        return SentPoll(message_id=self._message_id, poll_id=f"poll-{self._poll_id}")

    async def clear_pending_subscription(self):
        self.cleared += 1

    def texts(self, chat_id=None):
        return [text for cid, text, _ in self.messages if chat_id is None or cid == chat_id]


class FakeGenerator:
    """Возвращает ответы по очереди; последний ответ повторяется"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []  # (prompt, timeout)

    async def generate(self, prompt, timeout):
        self.calls.append((prompt, timeout))
        if not self.responses:
            return None
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class RecordingSleep:
    """asyncio.sleep без ожидания, запоминает задержки"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def make_user(user_id=5, first_name="Ann", language_code="en", is_bot=False):
    return User(id=user_id, is_bot=is_bot, first_name=first_name, language_code=language_code)


def command_entities(text):
    """Разметка bot_command, как её ставит Telegram"""
    match = _COMMAND_TOKEN.match(text or "")
    if match is None:
        return None
    return [MessageEntity(type="bot_command", offset=0, length=len(match.group(0)))]


def make_message(chat_id, text, message_id=1, user=None, reply_to=None, chat_type="group", entities=None):
    return Message(
        message_id=message_id,
        date=_DATE,
        chat=Chat(id=chat_id, type=chat_type),
        from_user=user if user is not None else make_user(),
        text=text,
        entities=entities if entities is not None else command_entities(text),
        reply_to_message=reply_to,
    )


def message_update(update_id, chat_id, text, **kwargs):
    return Update(update_id=update_id, message=make_message(chat_id, text, **kwargs))


def channel_update(update_id, chat_id, text, message_id=1):
    post = Message(
        message_id=message_id,
        date=_DATE,
        chat=Chat(id=chat_id, type="channel", title="News"),
        text=text,
        entities=command_entities(text),
    )
    return Update(update_id=update_id, channel_post=post)


def poll_answer_update(update_id, poll_id, option=0, user_id=5):
    fields = {"poll_id": poll_id, "option_ids": [option], "user": make_user(user_id)}
    # в новых версиях Bot API поле обязательное
    if "option_persistent_ids" in PollAnswer.model_fields:
        fields["option_persistent_ids"] = [str(option)]
    return Update(update_id=update_id, poll_answer=PollAnswer(**fields))


class ScriptedBot:
    """Вместо aiogram.Bot: метод возвращает заданный результат или бросает заданное исключение"""

    def __init__(self, **results):
        self.results = results
        self.calls = []

    async def _respond(self, name, kwargs):
        self.calls.append((name, kwargs))
        result = self.results.get(name)
        if isinstance(result, BaseException):
            raise result
        return result

    async def get_me(self, **kwargs):
        return await self._respond("get_me", kwargs)

    async def get_updates(self, **kwargs):
        return await self._respond("get_updates", kwargs)

    async def send_message(self, **kwargs):
        return await self._respond("send_message", kwargs)

    async def send_poll(self, **kwargs):
        return await self._respond("send_poll", kwargs)

    async def delete_webhook(self, **kwargs):
        return await self._respond("delete_webhook", kwargs)

    async def set_my_commands(self, commands, **kwargs):
        return await self._respond("set_my_commands", dict(kwargs, commands=commands))


QUIZ_JSON = '{"question":"X","choices":["1","2","3","4"],"answer_index":0}'
