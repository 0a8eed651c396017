"""
Enrollment Service
Course creation, enrollment and access checks.
"""
from flask import current_app

from coursestack_app.core.error_handlers import AuthorizationError, NotFoundError
from coursestack_app.core.extensions import db
from coursestack_app.models import Course, Enrollment, User


class EnrollmentService:
    """Manage courses and who is enrolled in them."""

    @staticmethod
    def get_course(course_id: int) -> Course:
        course = db.session.get(Course, course_id)
        if course is None:
            raise NotFoundError('Course not found', resource='course')
        return course

    @staticmethod
    def is_course_staff(user: User, course: Course) -> bool:
        """Admins and the course's instructor manage its content."""
        if user is None or course is None:
            return False
        return user.user_role == User.ROLE_ADMIN or course.instructor_id == user.user_id

    @staticmethod
    def get_active_enrollment(user_id: int, course_id: int):
        return Enrollment.query.filter(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
            Enrollment.status.in_(Enrollment.ACCESS_STATUSES),
        ).first()

    @staticmethod
    def is_enrolled(user_id: int, course_id: int) -> bool:
        return EnrollmentService.get_active_enrollment(user_id, course_id) is not None

    @staticmethod
    def create_course(user: User, title: str, description=None, is_published=False) -> Course:
        if user.user_role not in (User.ROLE_ADMIN, User.ROLE_INSTRUCTOR):
            raise AuthorizationError('Only instructors can create courses')
        course = Course(
            title=title,
            description=description,
            instructor_id=user.user_id,
            is_published=is_published,
        )
        db.session.add(course)
        db.session.commit()
        current_app.logger.info("User %s created course %s", user.user_id, course.course_id)
        return course

    @staticmethod
    def list_published_courses():
        return Course.query.filter_by(is_published=True).order_by(Course.created_at.desc(), Course.course_id.desc()).all()

    @staticmethod
    def enroll(user_id: int, course_id: int) -> Enrollment:
        """Enroll a user. Idempotent; re-activates a dropped enrollment."""
        course = EnrollmentService.get_course(course_id)
        if not course.is_published:
            raise NotFoundError('Course not found', resource='course')

        enrollment = Enrollment.query.filter_by(user_id=user_id, course_id=course_id).first()
        if enrollment is None:
            enrollment = Enrollment(user_id=user_id, course_id=course_id, status=Enrollment.STATUS_ACTIVE)
            db.session.add(enrollment)
        elif enrollment.status == Enrollment.STATUS_DROPPED:
            enrollment.status = Enrollment.STATUS_ACTIVE
        db.session.commit()
        current_app.logger.info("User %s enrolled in course %s", user_id, course_id)
        return enrollment

    @staticmethod
    def drop(user_id: int, course_id: int) -> Enrollment:
        enrollment = Enrollment.query.filter_by(user_id=user_id, course_id=course_id).first()
        if enrollment is None or enrollment.status == Enrollment.STATUS_DROPPED:
            raise NotFoundError('Enrollment not found', resource='enrollment')
        enrollment.status = Enrollment.STATUS_DROPPED
        db.session.commit()
        current_app.logger.info("User %s dropped course %s", user_id, course_id)
        return enrollment

    @staticmethod
    def get_user_enrollments(user_id: int):
        return Enrollment.query.filter_by(user_id=user_id).order_by(Enrollment.enrolled_at.desc()).all()
