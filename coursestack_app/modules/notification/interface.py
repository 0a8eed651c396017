from .models import Notification
from .services.notification_service import NotificationService


def notify_quiz_passed(user_id: int, course_id: int, quiz_id: int, quiz_title: str, score: int,
                       commit: bool = True) -> Notification:
    """Congratulate a user on passing a quiz for the first time."""
    return NotificationService.create_notification(
        user_id=user_id,
        title='Quiz Passed!',
        message=f'Congratulations! You passed the "{quiz_title}" quiz with a score of {score}%.',
        type=Notification.TYPE_ACHIEVEMENT,
        link=f'/courses/{course_id}/quizzes/{quiz_id}',
        meta_data={'course_id': course_id, 'quiz_id': quiz_id, 'score': score},
        commit=commit,
    )


def get_unread_count(user_id: int) -> int:
    """Get the number of unread notifications for a user."""
    return NotificationService.get_unread_count(user_id)
