"""Course and enrollment models."""

from __future__ import annotations

from sqlalchemy.sql import func

from ..core.extensions import db


class Course(db.Model):
    """A course owned by an instructor; quizzes hang off it."""

    __tablename__ = 'courses'

    course_id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    is_published = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    instructor = db.relationship('User', foreign_keys=[instructor_id])
    enrollments = db.relationship('Enrollment', backref='course', lazy='dynamic', cascade='all, delete-orphan')
    quizzes = db.relationship(
        'Quiz', backref='course', lazy=True, cascade='all, delete-orphan', order_by='Quiz.quiz_id'
    )

    def to_dict(self) -> dict[str, object]:
        return {
            'course_id': self.course_id,
            'title': self.title,
            'description': self.description,
            'instructor_id': self.instructor_id,
            'instructor_name': self.instructor.username if self.instructor else None,
            'is_published': self.is_published,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Course {self.course_id}: {self.title}>"


class Enrollment(db.Model):
    """Links a user to a course."""

    __tablename__ = 'enrollments'

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_DROPPED = 'DROPPED'
    # Statuses that still grant access to course assessments
    ACCESS_STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED)

    enrollment_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.course_id'), nullable=False)
    status = db.Column(db.String(20), default=STATUS_ACTIVE, nullable=False)
    enrolled_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    __table_args__ = (db.UniqueConstraint('user_id', 'course_id', name='_user_course_enrollment_uc'),)

    def to_dict(self) -> dict[str, object]:
        return {
            'enrollment_id': self.enrollment_id,
            'course_id': self.course_id,
            'course_title': self.course.title if self.course else None,
            'status': self.status,
            'enrolled_at': self.enrolled_at.isoformat() if self.enrolled_at else None,
        }
