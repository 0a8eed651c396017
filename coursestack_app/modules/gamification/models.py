from sqlalchemy.sql import func

from coursestack_app.core.extensions import db


class ScoreLog(db.Model):
    """Ledger row for every change to a user's total score."""
    __tablename__ = 'score_logs'

    log_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    score_change = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.String(255))
    item_type = db.Column(db.String(50))  # QUIZ_PASS, SYSTEM, ...
    reference_id = db.Column(db.Integer)
    timestamp = db.Column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)

    def to_dict(self):
        return {
            'log_id': self.log_id,
            'score_change': self.score_change,
            'reason': self.reason,
            'item_type': self.item_type,
            'reference_id': self.reference_id,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }
