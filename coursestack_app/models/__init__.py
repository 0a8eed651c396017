"""Database models package for CourseStack."""

from ..core.extensions import db

from .user import User
from .course import Course, Enrollment
from .system import ActivityLog
from ..modules.quiz.models import (
    CorrectAnswer,
    Question,
    QuestionOption,
    Quiz,
    QuizAttempt,
    UserAnswer,
)
from ..modules.gamification.models import ScoreLog
from ..modules.notification.models import Notification

__all__ = [
    'db',
    'User',
    'Course',
    'Enrollment',
    'ActivityLog',
    'Quiz',
    'Question',
    'QuestionOption',
    'CorrectAnswer',
    'QuizAttempt',
    'UserAnswer',
    'ScoreLog',
    'Notification',
]
