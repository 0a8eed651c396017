"""User account model."""

from __future__ import annotations

from flask_login import UserMixin
from sqlalchemy.sql import func
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.extensions import db


class User(UserMixin, db.Model):
    """Application user model."""

    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_INSTRUCTOR = 'instructor'
    ROLE_STUDENT = 'student'
    ROLE_LABELS = {
        ROLE_ADMIN: 'Administrator',
        ROLE_INSTRUCTOR: 'Instructor',
        ROLE_STUDENT: 'Student',
    }

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    user_role = db.Column(db.String(50), default=ROLE_STUDENT, nullable=False)
    # Cumulative gamification points, see ScoreLog for the ledger
    total_score = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    enrollments = db.relationship('Enrollment', backref='user', lazy=True, cascade='all, delete-orphan')
    quiz_attempts = db.relationship('QuizAttempt', backref='user', lazy='dynamic')

    def get_id(self):
        return str(self.user_id)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.user_role == self.ROLE_ADMIN

    def to_dict(self) -> dict[str, object]:
        return {
            'user_id': self.user_id,
            'username': self.username,
            'email': self.email,
            'user_role': self.user_role,
            'role_label': self.ROLE_LABELS.get(self.user_role, self.user_role),
            'total_score': self.total_score or 0,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.user_id}: {self.username}>"
