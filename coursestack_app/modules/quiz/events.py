"""
Event Handlers for the Quiz Module.

Writes the quiz activity trail. Failures are logged and never reach the
request that emitted the signal.
"""
from flask import current_app

from coursestack_app.core.extensions import db
from coursestack_app.core.signals import quiz_changed, quiz_passed, quiz_submitted
from coursestack_app.models import ActivityLog


def _log_quiz_activity(user_id, action, quiz_id, details):
    try:
        db.session.add(ActivityLog(
            user_id=user_id,
            action=action,
            entity_type='quiz',
            entity_id=quiz_id,
            details=details,
        ))
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"[Quiz] Failed to log activity {action} for quiz {quiz_id}: {e}", exc_info=True)


@quiz_submitted.connect
def on_quiz_submitted(sender, **kwargs):
    """
    Expected kwargs:
        - user_id, course_id, quiz_id, attempt_id: int
        - score: int, is_passed: bool
        - earned_points, total_points: int
    """
    _log_quiz_activity(
        kwargs['user_id'],
        'quiz_submitted',
        kwargs['quiz_id'],
        {
            'attempt_id': kwargs.get('attempt_id'),
            'score': kwargs.get('score'),
            'is_passed': kwargs.get('is_passed'),
        },
    )


@quiz_passed.connect
def on_quiz_passed(sender, **kwargs):
    _log_quiz_activity(
        kwargs['user_id'],
        'quiz_passed',
        kwargs['quiz_id'],
        {
            'attempt_id': kwargs.get('attempt_id'),
            'score': kwargs.get('score'),
            'points_awarded': kwargs.get('points_awarded'),
        },
    )


@quiz_changed.connect
def on_quiz_changed(sender, **kwargs):
    _log_quiz_activity(kwargs['user_id'], kwargs['action'], kwargs['quiz_id'], kwargs.get('details') or {})
