"""
Score Service
Points ledger and leaderboard.
"""
from datetime import datetime, timezone

from flask import current_app

from coursestack_app.core.extensions import db
from coursestack_app.models import User
from ..models import ScoreLog


class ScoreService:
    """Award points and read the ledger."""

    ITEM_TYPE_QUIZ_PASS = 'QUIZ_PASS'
    ITEM_TYPE_SYSTEM = 'SYSTEM'

    @staticmethod
    def award_points(user_id, amount, reason, item_type=None, reference_id=None, commit=True):
        """
        Add `amount` to the user's total and append a ScoreLog row.

        With commit=False the changes join the caller's transaction and any
        error propagates so the caller can roll back as a whole.
        """
        if amount == 0:
            return {'success': True, 'new_total': None, 'score_change': 0}

        user = db.session.get(User, user_id)
        if user is None:
            current_app.logger.warning("User %s not found, cannot award points.", user_id)
            return {'success': False, 'message': 'User not found'}

        user.total_score = (user.total_score or 0) + amount
        db.session.add(ScoreLog(
            user_id=user_id,
            score_change=amount,
            reason=reason,
            item_type=item_type,
            reference_id=reference_id,
            timestamp=datetime.now(timezone.utc),
        ))

        if not commit:
            db.session.flush()
            return {'success': True, 'new_total': user.total_score, 'score_change': amount}

        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            current_app.logger.error("Failed to award %s points to user %s", amount, user_id, exc_info=True)
            raise

        current_app.logger.info("Awarded %s points to user %s (%s)", amount, user_id, reason)
        return {'success': True, 'new_total': user.total_score, 'score_change': amount}

    @staticmethod
    def get_score_history(user_id, page=1, per_page=20):
        """Paginated ledger for one user, newest first."""
        pagination = ScoreLog.query.filter_by(user_id=user_id)\
            .order_by(ScoreLog.timestamp.desc(), ScoreLog.log_id.desc())\
            .paginate(page=page, per_page=per_page, error_out=False)

        return pagination.items, pagination.total

    @staticmethod
    def get_leaderboard(limit=10):
        """All-time top users by total score."""
        users = User.query.order_by(User.total_score.desc(), User.user_id.asc()).limit(limit).all()
        return [
            {
                'user_id': u.user_id,
                'username': u.username,
                'score': u.total_score or 0,
            } for u in users
        ]
