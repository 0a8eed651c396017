# File: coursestack_app/modules/quiz/logics/grading.py
"""
Scoring rules for quiz answers.

Pure functions, no database access: a question is reduced to an immutable
AnswerKey, a raw submitted value is parsed into the answer variant of the
question's type, and grade_answer() decides correctness. Points are
all-or-nothing per question.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, Dict, FrozenSet, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = 'MULTIPLE_CHOICE'
    TRUE_FALSE = 'TRUE_FALSE'
    FILL_BLANK = 'FILL_BLANK'
    SHORT_ANSWER = 'SHORT_ANSWER'
    MATCHING = 'MATCHING'


DEFAULT_KEYWORD_THRESHOLD = 0.6

_TOKEN_RE = re.compile(r"\w+")


class InvalidAnswerError(ValueError):
    """A submitted value does not have the shape its question type needs."""

    def __init__(self, question_type: QuestionType, errors: List[Dict[str, Any]]):
        self.question_type = question_type
        self.errors = errors
        super().__init__(f"Invalid answer for {question_type.value} question")


class MatchPair(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    item_id: StrictInt = Field(alias='itemId')
    match_id: StrictInt = Field(alias='matchId')


# --- Answer variants, one per grading rule ---

@dataclass(frozen=True)
class ChoiceAnswer:
    option_ids: Tuple[int, ...]


@dataclass(frozen=True)
class BooleanAnswer:
    value: bool


@dataclass(frozen=True)
class TextAnswer:
    text: str


@dataclass(frozen=True)
class MatchingAnswer:
    pairs: Tuple[Tuple[int, int], ...]


SubmittedAnswer = Union[ChoiceAnswer, BooleanAnswer, TextAnswer, MatchingAnswer]


_ADAPTERS: Dict[QuestionType, TypeAdapter] = {
    QuestionType.MULTIPLE_CHOICE: TypeAdapter(List[StrictInt]),
    QuestionType.TRUE_FALSE: TypeAdapter(StrictBool),
    QuestionType.FILL_BLANK: TypeAdapter(StrictStr),
    QuestionType.SHORT_ANSWER: TypeAdapter(StrictStr),
    QuestionType.MATCHING: TypeAdapter(List[MatchPair]),
}


def parse_answer(question_type: QuestionType, raw: Any) -> SubmittedAnswer:
    """Validate a raw JSON value and wrap it in the variant for `question_type`."""
    question_type = QuestionType(question_type)
    try:
        value = _ADAPTERS[question_type].validate_python(raw)
    except PydanticValidationError as exc:
        raise InvalidAnswerError(
            question_type,
            exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc

    if question_type is QuestionType.MULTIPLE_CHOICE:
        return ChoiceAnswer(tuple(value))
    if question_type is QuestionType.TRUE_FALSE:
        return BooleanAnswer(value)
    if question_type is QuestionType.MATCHING:
        return MatchingAnswer(tuple((pair.item_id, pair.match_id) for pair in value))
    return TextAnswer(value)


def answer_to_json(answer: SubmittedAnswer) -> Any:
    """JSON-ready form of a parsed answer, as echoed back to the client."""
    if isinstance(answer, ChoiceAnswer):
        return list(answer.option_ids)
    if isinstance(answer, BooleanAnswer):
        return answer.value
    if isinstance(answer, MatchingAnswer):
        return [{'itemId': item_id, 'matchId': match_id} for item_id, match_id in answer.pairs]
    return answer.text


@dataclass(frozen=True)
class AnswerKey:
    """What a question's stored correct answers reduce to for grading."""

    question_id: int
    question_type: QuestionType
    points: int
    option_ids: FrozenSet[int] = frozenset()
    texts: Tuple[str, ...] = ()
    pairs: FrozenSet[Tuple[int, int]] = frozenset()
    has_correct_answer: bool = False

    @classmethod
    def from_question(cls, question) -> "AnswerKey":
        rows = list(question.correct_answers)
        return cls(
            question_id=question.question_id,
            question_type=QuestionType(question.question_type),
            points=question.points or 0,
            option_ids=frozenset(row.option_id for row in rows if row.option_id is not None),
            texts=tuple(row.answer_text for row in rows if row.answer_text),
            pairs=frozenset(
                (row.option_id, row.match_option_id)
                for row in rows
                if row.option_id is not None and row.match_option_id is not None
            ),
            has_correct_answer=bool(rows),
        )


@dataclass(frozen=True)
class QuestionGrade:
    question_id: int
    is_correct: bool
    points_earned: int


def normalize_text(text: str) -> str:
    return text.strip().casefold()


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall(text.casefold())


def grade_multiple_choice(key: AnswerKey, answer: ChoiceAnswer, **_) -> bool:
    # Exact set equality, order-independent, no credit for subsets
    return len(answer.option_ids) == len(key.option_ids) and set(answer.option_ids) == key.option_ids


def grade_true_false(key: AnswerKey, answer: BooleanAnswer, **_) -> bool:
    return answer.value == key.has_correct_answer


def grade_fill_blank(key: AnswerKey, answer: TextAnswer, **_) -> bool:
    submitted = normalize_text(answer.text)
    return any(submitted == normalize_text(text) for text in key.texts)


def keyword_threshold_count(keyword_count: int, threshold: float = DEFAULT_KEYWORD_THRESHOLD) -> int:
    """Keywords a submission must hit: ceil(threshold * keyword_count)."""
    return math.ceil(Fraction(str(threshold)) * keyword_count)


def grade_short_answer(key: AnswerKey, answer: TextAnswer, threshold: float = DEFAULT_KEYWORD_THRESHOLD) -> bool:
    """
    Approximate keyword overlap. Heuristic, not exact matching.

    Both sides are bags: a keyword repeated in the reference texts raises the
    bar, and every submitted token found among the keywords counts.
    """
    keywords = [token for text in key.texts for token in tokenize(text)]
    keyword_set = set(keywords)
    matched = sum(1 for token in tokenize(answer.text) if token in keyword_set)
    return matched >= keyword_threshold_count(len(keywords), threshold)


def grade_matching(key: AnswerKey, answer: MatchingAnswer, **_) -> bool:
    return len(answer.pairs) == len(key.pairs) and set(answer.pairs) == key.pairs


_GRADERS: Dict[QuestionType, Tuple[type, Callable[..., bool]]] = {
    QuestionType.MULTIPLE_CHOICE: (ChoiceAnswer, grade_multiple_choice),
    QuestionType.TRUE_FALSE: (BooleanAnswer, grade_true_false),
    QuestionType.FILL_BLANK: (TextAnswer, grade_fill_blank),
    QuestionType.SHORT_ANSWER: (TextAnswer, grade_short_answer),
    QuestionType.MATCHING: (MatchingAnswer, grade_matching),
}


def grade_answer(
    key: AnswerKey,
    answer: SubmittedAnswer,
    keyword_threshold: float = DEFAULT_KEYWORD_THRESHOLD,
) -> QuestionGrade:
    """Grade one answer. Full points when correct, zero otherwise."""
    expected_type, grader = _GRADERS[key.question_type]
    if not isinstance(answer, expected_type):
        raise TypeError(
            f"{key.question_type.value} question {key.question_id} cannot grade {type(answer).__name__}"
        )
    if key.question_type is QuestionType.SHORT_ANSWER:
        is_correct = grader(key, answer, threshold=keyword_threshold)
    else:
        is_correct = grader(key, answer)
    return QuestionGrade(
        question_id=key.question_id,
        is_correct=is_correct,
        points_earned=key.points if is_correct else 0,
    )


def compute_score(earned_points: int, total_points: int) -> int:
    """Percentage rounded half up; 0 for a quiz worth no points."""
    if total_points <= 0:
        return 0
    return (200 * earned_points + total_points) // (2 * total_points)


def is_passing(score: int, passing_score: int) -> bool:
    return score >= (passing_score or 0)
