from datetime import datetime, timezone

from coursestack_app.core.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class Notification(db.Model):
    __tablename__ = 'notifications'

    TYPE_SYSTEM = 'SYSTEM'
    TYPE_ACHIEVEMENT = 'ACHIEVEMENT'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)

    # Types: SYSTEM, ACHIEVEMENT
    type = db.Column(db.String(50), default=TYPE_SYSTEM)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text)
    link = db.Column(db.String(500), nullable=True)

    is_read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    # JSON context such as {'quiz_id': 3, 'score': 80}
    meta_data = db.Column(db.JSON, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'link': self.link,
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'meta_data': self.meta_data
        }
