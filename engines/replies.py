"""Отправка длинных ответов кусками."""

from typing import List, Optional

from config import MESSAGE_CHUNK_SIZE
from core.text import split_text


async def send_chunked(
    platform,
    chat_id: int,
    text: str,
    reply_to: Optional[int] = None,
    size: int = MESSAGE_CHUNK_SIZE,
) -> List[int]:
    """Отправляет текст кусками по size символов, по порядку

    Только первый кусок отправляется ответом на reply_to.

    Returns:
        message_id отправленных сообщений
    """
    sent = []
    for i, chunk in enumerate(split_text(text, size)):
        message_id = await platform.send_message(chat_id, chunk, reply_to=reply_to if i == 0 else None)
        sent.append(message_id)
    return sent
