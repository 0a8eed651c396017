from .quiz_service import QuizService
from .submission_service import QuizSubmissionService

__all__ = ['QuizService', 'QuizSubmissionService']
