"""
Quiz Service
Authoring and reading quizzes, attempt history.
"""
from flask import current_app

from coursestack_app.core.error_handlers import AuthorizationError, NotEnrolledError, NotFoundError
from coursestack_app.core.extensions import db
from coursestack_app.core.signals import quiz_changed
from coursestack_app.modules.course.interface import get_course, is_course_staff, is_enrolled

from ..logics.grading import QuestionType
from ..models import CorrectAnswer, Question, QuestionOption, Quiz, QuizAttempt
from ..schemas import AttemptSchema, QuestionIn, QuizCreateIn, QuizUpdateIn


class QuizService:
    """Quiz CRUD scoped to a course and the caller's role in it."""

    @staticmethod
    def resolve_access(user, course_id):
        """Return (course, is_staff). Learners need an active enrollment."""
        course = get_course(course_id)
        if is_course_staff(user, course):
            return course, True
        if not is_enrolled(user.user_id, course_id):
            raise NotEnrolledError('You must be enrolled in this course to view quizzes')
        return course, False

    @staticmethod
    def get_quiz(course_id, quiz_id, published_only=False) -> Quiz:
        quiz = Quiz.query.filter_by(quiz_id=quiz_id, course_id=course_id).first()
        if quiz is None or (published_only and not quiz.is_published):
            raise NotFoundError('Quiz not found', resource='quiz')
        return quiz

    @staticmethod
    def list_quizzes(user, course_id):
        _, is_staff = QuizService.resolve_access(user, course_id)
        query = Quiz.query.filter_by(course_id=course_id)
        if not is_staff:
            query = query.filter_by(is_published=True)
        return query.order_by(Quiz.quiz_id).all(), is_staff

    @staticmethod
    def create_quiz(user, course_id, payload: QuizCreateIn) -> Quiz:
        course = get_course(course_id)
        if not is_course_staff(user, course):
            raise AuthorizationError('You must be the instructor of this course to create quizzes')

        quiz = Quiz(
            course_id=course.course_id,
            title=payload.title,
            description=payload.description,
            passing_score=payload.passing_score,
            attempts_allowed=payload.attempts_allowed,
            time_limit=payload.time_limit,
            is_published=payload.is_published,
            show_correct_answers=payload.show_correct_answers,
        )
        for position, question_in in enumerate(payload.questions):
            quiz.questions.append(QuizService._build_question(question_in, position))

        db.session.add(quiz)
        db.session.commit()
        current_app.logger.info(
            "User %s created quiz %s with %s questions in course %s",
            user.user_id, quiz.quiz_id, len(payload.questions), course_id,
        )
        quiz_changed.send(
            current_app._get_current_object(),
            user_id=user.user_id,
            course_id=course_id,
            quiz_id=quiz.quiz_id,
            action='quiz_created',
            details={'title': quiz.title, 'question_count': len(payload.questions)},
        )
        return quiz

    @staticmethod
    def _build_question(question_in: QuestionIn, position: int) -> Question:
        qtype = question_in.question_type
        question = Question(
            question_type=qtype.value,
            text=question_in.text,
            points=question_in.points,
            position=position,
            explanation=question_in.explanation,
        )

        options_by_key = {}
        if qtype is not QuestionType.TRUE_FALSE:
            for index, (key, option_in) in enumerate(zip(question_in.option_keys(), question_in.options)):
                option = QuestionOption(option_text=option_in.option_text, position=index)
                question.options.append(option)
                options_by_key[key] = option

        if qtype is QuestionType.MULTIPLE_CHOICE:
            for key, option_in in zip(question_in.option_keys(), question_in.options):
                if option_in.is_correct:
                    question.correct_answers.append(CorrectAnswer(option=options_by_key[key]))
        elif qtype is QuestionType.TRUE_FALSE:
            # A correct-answer row marks the statement as true
            if question_in.is_true:
                question.correct_answers.append(CorrectAnswer())
        elif qtype in (QuestionType.FILL_BLANK, QuestionType.SHORT_ANSWER):
            for text in question_in.correct_answers:
                if text.strip():
                    question.correct_answers.append(CorrectAnswer(answer_text=text.strip()))
        elif qtype is QuestionType.MATCHING:
            for pair in question_in.matches:
                question.correct_answers.append(CorrectAnswer(
                    option=options_by_key[pair.item],
                    match_option=options_by_key[pair.match],
                ))
        return question

    @staticmethod
    def update_quiz(user, course_id, quiz_id, payload: QuizUpdateIn) -> Quiz:
        course = get_course(course_id)
        if not is_course_staff(user, course):
            raise AuthorizationError('You must be the instructor of this course to edit quizzes')
        quiz = QuizService.get_quiz(course_id, quiz_id)

        changes = payload.model_dump(include=payload.model_fields_set)
        for field, value in changes.items():
            setattr(quiz, field, value)
        db.session.commit()
        current_app.logger.info("User %s updated quiz %s: %s", user.user_id, quiz_id, sorted(changes))
        quiz_changed.send(
            current_app._get_current_object(),
            user_id=user.user_id,
            course_id=course_id,
            quiz_id=quiz_id,
            action='quiz_updated',
            details={'fields': sorted(changes)},
        )
        return quiz

    @staticmethod
    def get_user_attempts(user_id, quiz_id):
        return QuizAttempt.query.filter_by(user_id=user_id, quiz_id=quiz_id)\
            .order_by(QuizAttempt.started_at.desc(), QuizAttempt.attempt_id.desc())\
            .all()

    @staticmethod
    def get_student_data(user_id, quiz: Quiz) -> dict:
        """Attempt history summary shown to a learner next to the quiz."""
        attempts = QuizService.get_user_attempts(user_id, quiz.quiz_id)
        completed = [attempt for attempt in attempts if attempt.is_finalized]
        if quiz.attempts_allowed:
            remaining = max(0, quiz.attempts_allowed - len(completed))
        else:
            remaining = None
        return {
            'attempts': [AttemptSchema.dump(attempt) for attempt in attempts],
            'hasAttemptsLeft': remaining is None or remaining > 0,
            'attemptsRemaining': remaining,
            'bestScore': max((attempt.score for attempt in completed), default=None),
            'hasPassed': any(attempt.is_passed for attempt in completed),
        }

    @staticmethod
    def get_attempt(user, course_id, quiz_id, attempt_id) -> QuizAttempt:
        course, is_staff = QuizService.resolve_access(user, course_id)
        QuizService.get_quiz(course.course_id, quiz_id, published_only=not is_staff)
        attempt = QuizAttempt.query.filter_by(attempt_id=attempt_id, quiz_id=quiz_id).first()
        if attempt is None or (not is_staff and attempt.user_id != user.user_id):
            raise NotFoundError('Attempt not found', resource='attempt')
        return attempt
