"""
Входящие события Telegram.

Update от Telegram превращается в одно из событий (закрытый набор):
- CommandEvent: команда (/start, /quiz слово, ...) из сообщения или поста канала
- QueryEvent: упоминание бота или ответ на сообщение бота
- ChatMessageEvent: любой другой текст (только пишется в историю чата)
- PollAnswerEvent: ответ на неанонимный опрос

parse_update() возвращает None для всего, что бот не обрабатывает.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from aiogram.filters import CommandObject
from aiogram.types import Message, Update

from locales import detect_language


@dataclass(frozen=True)
class CommandEvent:
    chat_id: int
    message_id: int
    sender_id: Optional[int]
    language: str
    text: str
    command: str
    args: str = ""


@dataclass(frozen=True)
class QueryEvent:
    chat_id: int
    message_id: int
    sender_id: Optional[int]
    language: str
    text: str
    question: str
    reply_text: Optional[str] = None


@dataclass(frozen=True)
class ChatMessageEvent:
    chat_id: int
    message_id: int
    sender_id: Optional[int]
    sender_name: str
    text: str


@dataclass(frozen=True)
class PollAnswerEvent:
    poll_id: str
    sender_id: Optional[int]
    option_ids: Tuple[int, ...]


InboundEvent = Union[CommandEvent, QueryEvent, ChatMessageEvent, PollAnswerEvent]

def extract_command(message: Message) -> Optional[CommandObject]:
    """Команда из сущности bot_command в начале текста

    Команды размечает сам Telegram. Текст, который начинается с "/",
    но не размечен как команда, обрабатывается как обычное сообщение.

    Returns:
        CommandObject (имя в нижнем регистре, mention, args) или None
    """
    text = message.text or ""
    entity = next(
        (e for e in message.entities or [] if e.type == "bot_command" and e.offset == 0),
        None,
    )
    if entity is None:
        return None
    token = entity.extract_from(text)
    command, _, mention = token[1:].partition("@")
    args = text[len(token):].strip()
    return CommandObject(
        prefix=token[:1],
        command=command.lower(),
        mention=mention or None,
        args=args or None,
    )


def is_addressed_to(command: CommandObject, username: str) -> bool:
    """/cmd без @ адресована всем ботам чата, /cmd@name — только боту name"""
    return command.mention is None or command.mention.lower() == (username or "").lower()


def is_bot_mentioned(text: str, username: str) -> bool:
    return bool(username) and username.lower() in text.lower()


def strip_mention(text: str, username: str) -> str:
    """Убирает @username (и просто username) из текста"""
    if not username:
        return text.strip()
    pattern = re.compile(r"@?" + re.escape(username), re.IGNORECASE)
    return re.sub(r"\s{2,}", " ", pattern.sub("", text)).strip()


def _sender(message: Message) -> Tuple[Optional[int], str, Optional[str]]:
    user = message.from_user
    if user is None:
        title = message.chat.title or ""
        return None, title, None
    return user.id, user.full_name, user.language_code


def _command_event(message: Message, username: str) -> Optional[CommandEvent]:
    command = extract_command(message)
    if command is None or not is_addressed_to(command, username):
        return None
    sender_id, _, language_code = _sender(message)
    return CommandEvent(
        chat_id=message.chat.id,
        message_id=message.message_id,
        sender_id=sender_id,
        language=detect_language(language_code),
        text=message.text,
        command=command.command,
        args=command.args or "",
    )


def parse_update(update: Update, bot_id: int, username: str) -> Optional[InboundEvent]:
    """Превращает Update в событие

    Args:
        update: Update из getUpdates
        bot_id: id самого бота (для распознавания ответов на его сообщения)
        username: имя бота без @ (для упоминаний и /cmd@bot)

    Returns:
        Событие или None, если update не нужно обрабатывать
    """
    if update.poll_answer is not None:
        answer = update.poll_answer
        return PollAnswerEvent(
            poll_id=answer.poll_id,
            sender_id=answer.user.id if answer.user else None,
            option_ids=tuple(answer.option_ids),
        )

    # В каналах бот реагирует только на команды
    if update.channel_post is not None:
        post = update.channel_post
        if not post.text:
            return None
        return _command_event(post, username)

    message = update.message
    if message is None or not message.text:
        return None

    if extract_command(message) is not None:
        # команда другому боту тоже даёт None
        return _command_event(message, username)

    sender_id, sender_name, language_code = _sender(message)
    replied = message.reply_to_message
    is_reply_to_bot = (
        replied is not None
        and replied.from_user is not None
        and replied.from_user.id == bot_id
    )

    if is_bot_mentioned(message.text, username) or is_reply_to_bot:
        reply_text = None
        if replied is not None:
            reply_text = replied.text or replied.caption
        return QueryEvent(
            chat_id=message.chat.id,
            message_id=message.message_id,
            sender_id=sender_id,
            language=detect_language(language_code),
            text=message.text,
            question=strip_mention(message.text, username),
            reply_text=reply_text,
        )

    return ChatMessageEvent(
        chat_id=message.chat.id,
        message_id=message.message_id,
        sender_id=sender_id,
        sender_name=sender_name,
        text=message.text,
    )
