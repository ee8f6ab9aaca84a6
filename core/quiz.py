"""
Разбор квиза из ответа генеративной модели.

Модель возвращает JSON вида
    {"question": "...", "choices": ["a", "b", "c", "d"], "answer_index": 2}
но часто оборачивает его в ```json ... ``` или добавляет текст до/после.

extract_quiz() вырезает JSON-объект, декодирует его и проверяет правила
(вопрос, ровно 4 непустых строковых варианта, индекс 0-3). Все нарушения собираются вместе,
чтобы пользователь видел каждую причину отказа.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from config import QUIZ_CHOICES


class QuizProblem(Enum):
    """Причины, по которым квиз отклонён"""
    MISSING_QUESTION = "missing_question"
    WRONG_CHOICE_COUNT = "wrong_choice_count"
    BAD_INDEX = "bad_index"
    BAD_CHOICE = "bad_choice"


class QuizError(Exception):
    """Не удалось получить валидный квиз из текста."""
    pass


class QuizFormatError(QuizError):
    """В тексте нет JSON-объекта или он не декодируется."""
    pass


class QuizValidationError(QuizError):
    """JSON разобран, но квиз нарушает одно или несколько правил."""

    def __init__(self, problems: List[QuizProblem]):
        self.problems = list(problems)
        super().__init__(", ".join(p.value for p in self.problems))


@dataclass(frozen=True)
class Quiz:
    """Вопрос, ровно 4 варианта и индекс правильного ответа"""
    question: str
    choices: Tuple[str, ...]
    correct_index: int

    @property
    def correct_choice(self) -> str:
        return self.choices[self.correct_index]


def strip_code_fences(text: str) -> str:
    """Убирает маркеры ``` и ```json"""
    return text.replace("```json", "").replace("```JSON", "").replace("```", "").strip()


def _find_object(text: str) -> str:
    start = text.find('{')
    end = text.rfind('}')
    if start < 0 or end < 0 or end < start:
        raise QuizFormatError("no JSON object found in generated text")
    return text[start:end + 1]


def extract_quiz(raw: str) -> Quiz:
    """Извлекает квиз из сгенерированного текста

    Args:
        raw: ответ модели (может быть обёрнут в markdown)

    Returns:
        Валидный Quiz

    Raises:
        QuizFormatError: JSON-объект не найден или не декодируется
        QuizValidationError: нарушено хотя бы одно правило (все нарушения в .problems)
    """
    payload = _find_object(strip_code_fences(raw or ""))

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise QuizFormatError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise QuizFormatError("generated JSON is not an object")

    problems = []

    question = data.get("question")
    if not isinstance(question, str) or not question.strip():
        problems.append(QuizProblem.MISSING_QUESTION)

    choices = data.get("choices")
    if not isinstance(choices, list) or len(choices) != QUIZ_CHOICES:
        problems.append(QuizProblem.WRONG_CHOICE_COUNT)
    # пустой или нестроковый вариант Telegram не примет
    if isinstance(choices, list) and not all(isinstance(c, str) and c.strip() for c in choices):
        problems.append(QuizProblem.BAD_CHOICE)

    index = data.get("answer_index")
    # bool — подкласс int, True не считается индексом
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < QUIZ_CHOICES:
        problems.append(QuizProblem.BAD_INDEX)

    if problems:
        raise QuizValidationError(problems)

    return Quiz(
        question=question.strip(),
        choices=tuple(choice.strip() for choice in choices),
        correct_index=index,
    )
