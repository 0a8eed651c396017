"""Quiz database models."""

from __future__ import annotations

from datetime import timezone

from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from coursestack_app.core.extensions import db


def as_utc(value):
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Quiz(db.Model):
    """A graded quiz inside a course."""

    __tablename__ = 'quizzes'

    quiz_id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.course_id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    passing_score = db.Column(db.Integer, default=70, nullable=False)  # percent
    attempts_allowed = db.Column(db.Integer, default=0, nullable=False)  # 0 = unlimited
    time_limit = db.Column(db.Integer)  # minutes
    is_published = db.Column(db.Boolean, default=False, nullable=False)
    show_correct_answers = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    questions = db.relationship(
        'Question',
        backref='quiz',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='[Question.position, Question.question_id]',
    )
    attempts = db.relationship('QuizAttempt', backref='quiz', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def total_points(self) -> int:
        return sum(question.points or 0 for question in self.questions)

    def __repr__(self):
        return f"<Quiz {self.quiz_id}: {self.title}>"


class Question(db.Model):
    """One question of a quiz. `question_type` selects the grading rule."""

    __tablename__ = 'quiz_questions'

    question_id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.quiz_id'), nullable=False, index=True)
    question_type = db.Column(db.String(30), nullable=False)
    text = db.Column(db.Text, nullable=False)
    points = db.Column(db.Integer, default=1, nullable=False)
    position = db.Column(db.Integer, default=0, nullable=False)
    explanation = db.Column(db.Text)

    options = db.relationship(
        'QuestionOption',
        backref='question',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='[QuestionOption.position, QuestionOption.option_id]',
    )
    correct_answers = db.relationship(
        'CorrectAnswer',
        backref='question',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='CorrectAnswer.id',
    )

    def __repr__(self):
        return f"<Question {self.question_id} ({self.question_type})>"


class QuestionOption(db.Model):
    """A selectable option, or a matching item/target."""

    __tablename__ = 'quiz_question_options'

    option_id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('quiz_questions.question_id'), nullable=False, index=True)
    option_text = db.Column(db.Text, nullable=False)
    position = db.Column(db.Integer, default=0, nullable=False)


class CorrectAnswer(db.Model):
    """
    Reference value a submission is graded against.

    MULTIPLE_CHOICE uses option_id, MATCHING uses option_id -> match_option_id,
    FILL_BLANK and SHORT_ANSWER use answer_text. For TRUE_FALSE the mere
    presence of a row means the statement is true.
    """

    __tablename__ = 'quiz_correct_answers'

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('quiz_questions.question_id'), nullable=False, index=True)
    option_id = db.Column(db.Integer, db.ForeignKey('quiz_question_options.option_id'), nullable=True)
    match_option_id = db.Column(db.Integer, db.ForeignKey('quiz_question_options.option_id'), nullable=True)
    answer_text = db.Column(db.Text, nullable=True)

    option = db.relationship('QuestionOption', foreign_keys=[option_id])
    match_option = db.relationship('QuestionOption', foreign_keys=[match_option_id])


class QuizAttempt(db.Model):
    """
    One submission of a quiz by a user.

    The row is committed before grading starts; score, is_passed and
    completed_at are only set when the attempt is finalized. An attempt with
    completed_at NULL is incomplete and does not count toward the limit.
    """

    __tablename__ = 'quiz_attempts'

    attempt_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.quiz_id'), nullable=False, index=True)
    started_at = db.Column(db.DateTime(timezone=True), nullable=False)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    score = db.Column(db.Integer, nullable=True)
    is_passed = db.Column(db.Boolean, default=False, nullable=False)
    earned_points = db.Column(db.Integer, nullable=True)
    total_points = db.Column(db.Integer, nullable=True)
    correct_count = db.Column(db.Integer, nullable=True)

    answers = db.relationship(
        'UserAnswer', backref='attempt', lazy=True, cascade='all, delete-orphan', order_by='UserAnswer.id'
    )

    @property
    def is_finalized(self) -> bool:
        return self.completed_at is not None and self.score is not None

    @property
    def time_taken_seconds(self):
        if not self.is_finalized:
            return None
        delta = as_utc(self.completed_at) - as_utc(self.started_at)
        return max(0, int(delta.total_seconds()))

    def __repr__(self):
        return f"<QuizAttempt {self.attempt_id} user={self.user_id} quiz={self.quiz_id}>"


class UserAnswer(db.Model):
    """Graded answer to one question within an attempt. Write-once."""

    __tablename__ = 'quiz_user_answers'

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey('quiz_attempts.attempt_id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('quiz_questions.question_id'), nullable=False)
    answer_value = db.Column(JSON)
    text_answer = db.Column(db.Text)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    points_earned = db.Column(db.Integer, default=0, nullable=False)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False)

    __table_args__ = (db.UniqueConstraint('attempt_id', 'question_id', name='_attempt_question_uc'),)
