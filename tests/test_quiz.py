"""
Тест разбора квиза из ответа модели.

Запуск: python -m pytest tests/test_quiz.py -v
"""

import json

import pytest

from core.quiz import (
    Quiz,
    QuizFormatError,
    QuizProblem,
    QuizValidationError,
    extract_quiz,
)

CLEAN = '{"question":"Q","choices":["a","b","c","d"],"answer_index":2}'


def test_clean_json_matches_direct_decoding():
    """Чистый JSON даёт тот же квиз, что и прямое декодирование"""
    data = json.loads(CLEAN)
    direct = Quiz(data["question"], tuple(data["choices"]), data["answer_index"])

    assert extract_quiz(CLEAN) == direct
    assert extract_quiz(CLEAN).correct_choice == "c"


@pytest.mark.parametrize("wrapped", [
    f"```json\n{CLEAN}\n```",
    f"```\n{CLEAN}\n```",
    f"Sure! Here is your quiz:\n{CLEAN}\nGood luck.",
    f"Here you go ```json {CLEAN} ``` enjoy",
])
def test_wrapped_json_recovers_same_quiz(wrapped):
    assert extract_quiz(wrapped) == extract_quiz(CLEAN)


@pytest.mark.parametrize("raw", [
    "no json here at all",
    "} backwards {",
    "{ not json }",
    "",
    "[1, 2, 3]",
])
def test_format_errors(raw):
    with pytest.raises(QuizFormatError):
        extract_quiz(raw)


def test_missing_question():
    with pytest.raises(QuizValidationError) as exc:
        extract_quiz('{"question":"  ","choices":["a","b","c","d"],"answer_index":0}')
    assert exc.value.problems == [QuizProblem.MISSING_QUESTION]


def test_wrong_choice_count():
    with pytest.raises(QuizValidationError) as exc:
        extract_quiz('{"question":"Q","choices":["a","b","c"],"answer_index":0}')
    assert exc.value.problems == [QuizProblem.WRONG_CHOICE_COUNT]


@pytest.mark.parametrize("index", ["4", "-1", "true", "\"1\"", "null"])
def test_bad_index(index):
    raw = '{"question":"Q","choices":["a","b","c","d"],"answer_index":%s}' % index
    with pytest.raises(QuizValidationError) as exc:
        extract_quiz(raw)
    assert exc.value.problems == [QuizProblem.BAD_INDEX]


def test_all_problems_reported_together():
    """Все три нарушения видны сразу, а не только первое"""
    with pytest.raises(QuizValidationError) as exc:
        extract_quiz('{"choices":["a"],"answer_index":7}')
    assert exc.value.problems == [
        QuizProblem.MISSING_QUESTION,
        QuizProblem.WRONG_CHOICE_COUNT,
        QuizProblem.BAD_INDEX,
    ]


def test_valid_quiz_invariants():
    quiz = extract_quiz('{"question":"Q","choices":["a","b","c"," d "],"answer_index":3}')
    assert len(quiz.choices) == 4
    assert 0 <= quiz.correct_index <= 3
    assert quiz.choices[3] == "d"


@pytest.mark.parametrize("choice", ['""', '"   "', "null", "4", '{"text":"d"}'])
def test_blank_or_non_string_choice_rejected(choice):
    raw = '{"question":"Q","choices":["a","b","c",%s],"answer_index":0}' % choice
    with pytest.raises(QuizValidationError) as exc:
        extract_quiz(raw)
    assert exc.value.problems == [QuizProblem.BAD_CHOICE]
