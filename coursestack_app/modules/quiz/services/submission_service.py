# File: coursestack_app/modules/quiz/services/submission_service.py
"""
Quiz submission workflow.

Checks preconditions, grades every answer with the pure rules in
logics.grading, persists the attempt and its answers and applies the
first-pass rewards. The attempt row is committed before grading so a failed
grading pass leaves a visibly unfinalized attempt; answers, finalization and
rewards share one transaction.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from flask import current_app
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from coursestack_app.core.error_handlers import (
    AttemptLimitError,
    AuthenticationError,
    NotEnrolledError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from coursestack_app.core.extensions import db
from coursestack_app.core.signals import quiz_passed, quiz_submitted
from coursestack_app.modules.course.interface import is_enrolled
from coursestack_app.modules.gamification.interface import award_quiz_pass
from coursestack_app.modules.notification.interface import notify_quiz_passed

from ..config import QuizModuleConfig
from ..logics.grading import (
    DEFAULT_KEYWORD_THRESHOLD,
    AnswerKey,
    InvalidAnswerError,
    SubmittedAnswer,
    TextAnswer,
    answer_to_json,
    compute_score,
    grade_answer,
    is_passing,
    parse_answer,
)
from ..models import Quiz, QuizAttempt, UserAnswer, as_utc
from ..schemas import AnswerIn, AnswerResultDTO, SubmissionResultDTO

_ANSWER_LIST = TypeAdapter(List[AnswerIn])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuizSubmissionService:
    """Grade and persist quiz submissions."""

    @staticmethod
    def count_completed_attempts(user_id: int, quiz_id: int, exclude_attempt_id: Optional[int] = None) -> int:
        query = QuizAttempt.query.filter(
            QuizAttempt.user_id == user_id,
            QuizAttempt.quiz_id == quiz_id,
            QuizAttempt.completed_at.isnot(None),
        )
        if exclude_attempt_id is not None:
            query = query.filter(QuizAttempt.attempt_id != exclude_attempt_id)
        return query.count()

    @staticmethod
    def has_passed(user_id: int, quiz_id: int) -> bool:
        return QuizAttempt.query.filter_by(user_id=user_id, quiz_id=quiz_id, is_passed=True).first() is not None

    @staticmethod
    def ensure_attempts_left(user_id: int, quiz: Quiz, exclude_attempt_id: Optional[int] = None) -> None:
        if not quiz.attempts_allowed:
            return
        used = QuizSubmissionService.count_completed_attempts(user_id, quiz.quiz_id, exclude_attempt_id)
        if used >= quiz.attempts_allowed:
            raise AttemptLimitError()

    @staticmethod
    def submit(
        user_id: Optional[int],
        course_id: int,
        quiz_id: int,
        answers: Iterable[Union[AnswerIn, Mapping[str, Any]]],
        started_at: Optional[datetime] = None,
    ) -> SubmissionResultDTO:
        """
        Grade a learner's answers for one quiz and persist the finalized attempt.

        Raises AuthenticationError, NotEnrolledError, NotFoundError,
        AttemptLimitError or ValidationError before anything is written, and
        PersistenceError when the store fails afterwards.
        """
        if user_id is None:
            raise AuthenticationError()

        if not is_enrolled(user_id, course_id):
            raise NotEnrolledError('You must be enrolled in this course to submit quizzes')

        quiz = Quiz.query.filter_by(quiz_id=quiz_id, course_id=course_id).first()
        if quiz is None or not quiz.is_published:
            raise NotFoundError('Quiz not found', resource='quiz')

        QuizSubmissionService.ensure_attempts_left(user_id, quiz)

        keys = [AnswerKey.from_question(question) for question in quiz.questions]
        parsed = QuizSubmissionService._parse_answers(keys, answers)
        now = _utcnow()
        started_at = QuizSubmissionService._resolve_started_at(started_at, now)

        # Decided once, before any mutation
        is_first_pass_candidate = not QuizSubmissionService.has_passed(user_id, quiz_id)

        attempt = QuizAttempt(user_id=user_id, quiz_id=quiz_id, started_at=started_at)
        try:
            db.session.add(attempt)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Could not create attempt for user %s on quiz %s", user_id, quiz_id, exc_info=True
            )
            raise PersistenceError('Failed to submit quiz') from exc

        attempt_id = attempt.attempt_id
        current_app.logger.info("Attempt %s started: user=%s quiz=%s", attempt_id, user_id, quiz_id)

        try:
            result = QuizSubmissionService._grade_and_finalize(
                attempt, quiz, keys, parsed, started_at, is_first_pass_candidate
            )
            db.session.commit()
        except AttemptLimitError:
            db.session.rollback()
            current_app.logger.warning(
                "Attempt %s exceeded the limit of quiz %s at finalize, left unfinalized", attempt_id, quiz_id
            )
            raise
        except Exception as exc:
            db.session.rollback()
            current_app.logger.error(
                "Grading attempt %s failed, left unfinalized", attempt_id, exc_info=True
            )
            raise PersistenceError('Failed to submit quiz') from exc

        current_app.logger.info(
            "Attempt %s finalized: score=%s passed=%s first_pass=%s",
            attempt_id, result.score, result.is_passed, result.is_first_pass,
        )

        app = current_app._get_current_object()
        quiz_submitted.send(
            app,
            user_id=user_id,
            course_id=course_id,
            quiz_id=quiz_id,
            attempt_id=attempt_id,
            score=result.score,
            is_passed=result.is_passed,
            earned_points=result.earned_points,
            total_points=result.total_points,
        )
        if result.is_first_pass:
            quiz_passed.send(
                app,
                user_id=user_id,
                course_id=course_id,
                quiz_id=quiz_id,
                attempt_id=attempt_id,
                score=result.score,
                points_awarded=result.total_points,
            )
        return result

    @staticmethod
    def _parse_answers(keys: List[AnswerKey], answers) -> Dict[int, SubmittedAnswer]:
        try:
            items = _ANSWER_LIST.validate_python(list(answers))
        except PydanticValidationError as exc:
            raise ValidationError(
                'Invalid answers',
                errors=[{'loc': [str(p) for p in err['loc']], 'msg': err['msg']} for err in exc.errors()],
            ) from exc

        keys_by_id = {key.question_id: key for key in keys}
        parsed: Dict[int, SubmittedAnswer] = {}
        errors = []
        for item in items:
            key = keys_by_id.get(item.question_id)
            if key is None:
                errors.append({'questionId': item.question_id, 'msg': 'Question does not belong to this quiz'})
                continue
            if item.question_id in parsed:
                errors.append({'questionId': item.question_id, 'msg': 'Question answered more than once'})
                continue
            try:
                parsed[item.question_id] = parse_answer(key.question_type, item.answer)
            except InvalidAnswerError as exc:
                errors.append({
                    'questionId': item.question_id,
                    'type': exc.question_type.value,
                    'msg': '; '.join(err['msg'] for err in exc.errors) or 'Invalid answer',
                })
        if errors:
            raise ValidationError('Invalid answers', errors=errors)
        return parsed

    @staticmethod
    def _resolve_started_at(started_at: Optional[datetime], now: datetime) -> datetime:
        if started_at is None:
            return now
        started_at = as_utc(started_at).astimezone(timezone.utc)
        if started_at > now + QuizModuleConfig.CLIENT_CLOCK_SKEW:
            raise ValidationError('startedAt cannot be in the future')
        if started_at < now - QuizModuleConfig.MAX_ATTEMPT_DURATION:
            raise ValidationError('startedAt is too far in the past')
        return min(started_at, now)

    @staticmethod
    def _grade_and_finalize(attempt, quiz, keys, parsed, started_at, is_first_pass_candidate):
        threshold = current_app.config.get('QUIZ_SHORT_ANSWER_THRESHOLD', DEFAULT_KEYWORD_THRESHOLD)

        total_points = 0
        earned_points = 0
        correct_count = 0
        user_answers: List[AnswerResultDTO] = []

        for key in keys:
            total_points += key.points
            answer = parsed.get(key.question_id)
            if answer is None:
                continue

            grade = grade_answer(key, answer, keyword_threshold=threshold)
            if grade.is_correct:
                earned_points += grade.points_earned
                correct_count += 1

            answer_json = answer_to_json(answer)
            db.session.add(UserAnswer(
                attempt_id=attempt.attempt_id,
                question_id=key.question_id,
                answer_value=answer_json,
                text_answer=answer.text if isinstance(answer, TextAnswer) else None,
                is_correct=grade.is_correct,
                points_earned=grade.points_earned,
                submitted_at=_utcnow(),
            ))
            user_answers.append(AnswerResultDTO(
                question_id=key.question_id,
                user_answer=answer_json,
                is_correct=grade.is_correct,
                points_earned=grade.points_earned,
            ))

        db.session.flush()
        # Re-check right before the final write to narrow the double-submit race
        QuizSubmissionService.ensure_attempts_left(attempt.user_id, quiz, exclude_attempt_id=attempt.attempt_id)

        score = compute_score(earned_points, total_points)
        passed = is_passing(score, quiz.passing_score)
        completed_at = _utcnow()

        attempt.score = score
        attempt.is_passed = passed
        attempt.earned_points = earned_points
        attempt.total_points = total_points
        attempt.correct_count = correct_count
        attempt.completed_at = completed_at

        is_first_pass = passed and is_first_pass_candidate
        if is_first_pass:
            award_quiz_pass(attempt.user_id, quiz.quiz_id, quiz.title, total_points, commit=False)
            notify_quiz_passed(attempt.user_id, quiz.course_id, quiz.quiz_id, quiz.title, score, commit=False)

        return SubmissionResultDTO(
            quiz_attempt_id=attempt.attempt_id,
            score=score,
            total_points=total_points,
            earned_points=earned_points,
            correct_count=correct_count,
            total_questions=len(keys),
            is_passed=passed,
            is_first_pass=is_first_pass,
            started_at=started_at,
            completed_at=completed_at,
            user_answers=user_answers,
        )
