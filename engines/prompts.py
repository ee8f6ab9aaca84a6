"""
Промпты для Gemini.

- chat_prompt: короткий ответ на упоминание / ответ боту
- HOURLY_QUIZ_PROMPT: ежечасный квиз по английской лексике
- word_quiz_prompt: квиз по одному слову (/quiz слово)
- summary_prompt: пересказ последних сообщений чата (/summary)
"""

from typing import List, Optional

from core.history import HistoryRecord

_QUIZ_FORMAT = (
    'Return JSON only: {"question":"...","choices":["opt1","opt2","opt3","opt4"],"answer_index":<0-3>}.'
)

HOURLY_QUIZ_PROMPT = f"""Follow these response guidelines:
1. DO NOT use markdown formatting (no asterisks for bold/italic)
2. Create a multiple-choice English vocabulary question with exactly 4 choices and one correct answer.
{_QUIZ_FORMAT}"""


def word_quiz_prompt(word: str) -> str:
    return f"""Follow these response guidelines:
1. DO NOT use markdown formatting (no asterisks for bold/italic)
2. Create a multiple-choice question that tests the meaning or usage of the English word "{word}".
3. Exactly 4 choices, one correct answer.
{_QUIZ_FORMAT}"""


def chat_prompt(question: str, reply_text: Optional[str] = None) -> str:
    context = ""
    if reply_text:
        context = f'\n    They are replying to this earlier message: "{reply_text}"\n'
    return f"""You are a helpful and witty Telegram bot. The user asked: "{question}"
{context}
    Follow these response guidelines:
    1. Keep all responses brief and concise (2-3 sentences maximum)
    2. DO NOT use markdown formatting (no asterisks for bold/italic)
    3. Be conversational and friendly
    4. Focus only on the most essential information
    Response language: Same as the user's message"""


def summary_prompt(records: List[HistoryRecord]) -> str:
    transcript = "\n".join(f"{r.sender}: {r.text}" for r in records)
    return f"""Summarise the following group chat conversation in a few short bullet points.
Mention who said what when it matters. DO NOT use markdown formatting.
Response language: the language most of the conversation is in.

{transcript}"""
