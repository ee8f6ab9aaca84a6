"""Разбиение длинного текста под лимит сообщения Telegram.

Telegram считает длину сообщения в UTF-16: символ вне BMP (эмодзи и т.п.)
занимает две единицы.
"""

from typing import List

from config import MESSAGE_CHUNK_SIZE


def utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def split_text(text: str, size: int = MESSAGE_CHUNK_SIZE) -> List[str]:
    """Режет текст на подряд идущие куски не длиннее size единиц UTF-16

    Суррогатная пара не разрывается.
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")

    chunks = []
    start = units = 0
    for i, char in enumerate(text or ""):
        width = 2 if ord(char) > 0xFFFF else 1
        if units + width > size and i > start:
            chunks.append(text[start:i])
            start, units = i, 0
        units += width
    if text and start < len(text):
        chunks.append(text[start:])
    return chunks
