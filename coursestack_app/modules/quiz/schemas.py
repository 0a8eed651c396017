"""Request payloads (pydantic) and response shapes for the quiz API.

The quiz API speaks camelCase on the wire; payload models accept the
snake_case field names as well.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import QuizModuleConfig
from .logics.grading import QuestionType
from .models import as_utc


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

class AnswerIn(_Payload):
    question_id: int = Field(alias='questionId')
    # Shape depends on the question type, checked once the quiz is loaded
    answer: Any


class QuizSubmissionIn(_Payload):
    answers: List[AnswerIn]
    started_at: Optional[datetime] = Field(None, alias='startedAt')


# ---------------------------------------------------------------------------
# Authoring
# ---------------------------------------------------------------------------

class OptionIn(_Payload):
    key: Optional[str] = None
    option_text: str = Field(alias='optionText', min_length=1)
    is_correct: bool = Field(False, alias='isCorrect')


class MatchIn(_Payload):
    item: str
    match: str


class QuestionIn(_Payload):
    text: str = Field(min_length=1)
    question_type: QuestionType = Field(alias='type')
    points: int = Field(1, ge=0)
    explanation: Optional[str] = None
    options: List[OptionIn] = Field(default_factory=list)
    # FILL_BLANK / SHORT_ANSWER reference texts
    correct_answers: List[str] = Field(default_factory=list, alias='correctAnswers')
    # TRUE_FALSE
    is_true: Optional[bool] = Field(None, alias='isTrue')
    # MATCHING, by option key
    matches: List[MatchIn] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_answer_data(self):
        keys = [option.key if option.key is not None else str(index) for index, option in enumerate(self.options)]
        if len(set(keys)) != len(keys):
            raise ValueError('option keys must be unique within a question')

        qtype = self.question_type
        if qtype is QuestionType.MULTIPLE_CHOICE:
            if len(self.options) < 2:
                raise ValueError('multiple choice questions need at least two options')
            if not any(option.is_correct for option in self.options):
                raise ValueError('multiple choice questions need at least one correct option')
        elif qtype is QuestionType.TRUE_FALSE:
            if self.is_true is None:
                raise ValueError('true/false questions need isTrue')
        elif qtype in (QuestionType.FILL_BLANK, QuestionType.SHORT_ANSWER):
            if not [text for text in self.correct_answers if text.strip()]:
                raise ValueError(f'{qtype.value.lower()} questions need at least one correct answer text')
        elif qtype is QuestionType.MATCHING:
            if not self.matches:
                raise ValueError('matching questions need at least one match')
            known = set(keys)
            items = [pair.item for pair in self.matches]
            if len(set(items)) != len(items):
                raise ValueError('each matching item can only be matched once')
            for pair in self.matches:
                if pair.item not in known or pair.match not in known:
                    raise ValueError(f'unknown option key in match {pair.item!r} -> {pair.match!r}')
                if pair.item == pair.match:
                    raise ValueError('an item cannot be matched to itself')
        return self

    def option_keys(self) -> List[str]:
        return [option.key if option.key is not None else str(index) for index, option in enumerate(self.options)]


class QuizCreateIn(_Payload):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    passing_score: int = Field(QuizModuleConfig.DEFAULT_PASSING_SCORE, alias='passingScore', ge=0, le=100)
    attempts_allowed: int = Field(0, alias='attemptsAllowed', ge=0)
    time_limit: Optional[int] = Field(None, alias='timeLimit', ge=0)
    is_published: bool = Field(False, alias='isPublished')
    show_correct_answers: bool = Field(False, alias='showCorrectAnswers')
    questions: List[QuestionIn] = Field(default_factory=list)


class QuizUpdateIn(_Payload):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    passing_score: Optional[int] = Field(None, alias='passingScore', ge=0, le=100)
    attempts_allowed: Optional[int] = Field(None, alias='attemptsAllowed', ge=0)
    time_limit: Optional[int] = Field(None, alias='timeLimit', ge=0)
    is_published: Optional[bool] = Field(None, alias='isPublished')
    show_correct_answers: Optional[bool] = Field(None, alias='showCorrectAnswers')

    @model_validator(mode='after')
    def not_empty(self):
        if not self.model_fields_set:
            raise ValueError('no fields to update')
        for name in ('title', 'passing_score', 'attempts_allowed', 'is_published', 'show_correct_answers'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} cannot be null')
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

@dataclass
class AnswerResultDTO:
    question_id: int
    user_answer: Any
    is_correct: bool
    points_earned: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'questionId': self.question_id,
            'userAnswer': self.user_answer,
            'isCorrect': self.is_correct,
            'pointsEarned': self.points_earned,
        }


@dataclass
class SubmissionResultDTO:
    quiz_attempt_id: int
    score: int
    total_points: int
    earned_points: int
    correct_count: int
    total_questions: int
    is_passed: bool
    is_first_pass: bool
    started_at: datetime
    completed_at: datetime
    user_answers: List[AnswerResultDTO] = field(default_factory=list)

    @property
    def time_taken_seconds(self) -> int:
        return max(0, int((as_utc(self.completed_at) - as_utc(self.started_at)).total_seconds()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'quizAttemptId': self.quiz_attempt_id,
            'score': self.score,
            'totalPoints': self.total_points,
            'earnedPoints': self.earned_points,
            'correctCount': self.correct_count,
            'totalQuestions': self.total_questions,
            'isPassed': self.is_passed,
            'isFirstPass': self.is_first_pass,
            'startedAt': as_utc(self.started_at).isoformat(),
            'completedAt': as_utc(self.completed_at).isoformat(),
            'timeTakenSeconds': self.time_taken_seconds,
            'userAnswers': [answer.to_dict() for answer in self.user_answers],
        }


class QuizSchema:
    @staticmethod
    def dump_summary(quiz, question_count: Optional[int] = None) -> Dict[str, Any]:
        return {
            'id': quiz.quiz_id,
            'courseId': quiz.course_id,
            'title': quiz.title,
            'description': quiz.description,
            'passingScore': quiz.passing_score,
            'attemptsAllowed': quiz.attempts_allowed,
            'timeLimit': quiz.time_limit,
            'isPublished': quiz.is_published,
            'showCorrectAnswers': quiz.show_correct_answers,
            'questionCount': question_count if question_count is not None else len(quiz.questions),
            'totalPoints': quiz.total_points,
        }

    @staticmethod
    def dump(quiz, include_answers: bool) -> Dict[str, Any]:
        data = QuizSchema.dump_summary(quiz)
        data['questions'] = [QuestionSchema.dump(question, include_answers) for question in quiz.questions]
        return data


class QuestionSchema:
    @staticmethod
    def dump(question, include_answers: bool) -> Dict[str, Any]:
        data = {
            'id': question.question_id,
            'type': question.question_type,
            'text': question.text,
            'points': question.points,
            'position': question.position,
            'options': [{'id': option.option_id, 'text': option.option_text} for option in question.options],
        }
        if include_answers:
            data['explanation'] = question.explanation
            data['correctAnswers'] = [
                {
                    'optionId': row.option_id,
                    'matchOptionId': row.match_option_id,
                    'answerText': row.answer_text,
                }
                for row in question.correct_answers
            ]
        return data


class AttemptSchema:
    @staticmethod
    def dump(attempt, include_answers: bool = False) -> Dict[str, Any]:
        started_at = as_utc(attempt.started_at)
        completed_at = as_utc(attempt.completed_at)
        data = {
            'id': attempt.attempt_id,
            'quizId': attempt.quiz_id,
            'userId': attempt.user_id,
            'score': attempt.score,
            'isPassed': attempt.is_passed,
            'isFinalized': attempt.is_finalized,
            'earnedPoints': attempt.earned_points,
            'totalPoints': attempt.total_points,
            'correctCount': attempt.correct_count,
            'startedAt': started_at.isoformat() if started_at else None,
            'completedAt': completed_at.isoformat() if completed_at else None,
            'timeTakenSeconds': attempt.time_taken_seconds,
        }
        if include_answers:
            data['userAnswers'] = [
                AnswerResultDTO(
                    question_id=answer.question_id,
                    user_answer=answer.answer_value,
                    is_correct=answer.is_correct,
                    points_earned=answer.points_earned,
                ).to_dict()
                for answer in attempt.answers
            ]
        return data
