"""
Event Handlers for Gamification Module.

Listens to signals from other modules and triggers gamification logic.
"""
from flask import current_app

from coursestack_app.core.signals import user_registered

WELCOME_BONUS_POINTS = 50


@user_registered.connect
def on_user_registered(sender, user, **kwargs):
    """Grant the welcome bonus to new users."""
    from .services.scoring_service import ScoreService

    try:
        ScoreService.award_points(
            user_id=user.user_id,
            amount=WELCOME_BONUS_POINTS,
            reason="WELCOME_BONUS",
            item_type=ScoreService.ITEM_TYPE_SYSTEM,
        )
    except Exception as e:
        # Registration already succeeded; the bonus is best effort
        current_app.logger.error(f"Error granting welcome bonus to user {user.user_id}: {e}")
