# File: coursestack_app/modules/course/routes.py
from flask import jsonify
from flask_login import current_user, login_required

from coursestack_app.core.error_handlers import success_response
from coursestack_app.core.validation import load_json

from . import course_bp
from .schemas import CourseCreateIn
from .services import EnrollmentService


@course_bp.route('', methods=['GET'])
@login_required
def list_courses():
    courses = EnrollmentService.list_published_courses()
    return jsonify(success_response([course.to_dict() for course in courses]))


@course_bp.route('', methods=['POST'])
@login_required
def create_course():
    payload = load_json(CourseCreateIn)
    course = EnrollmentService.create_course(
        current_user,
        title=payload.title,
        description=payload.description,
        is_published=payload.is_published,
    )
    return jsonify(success_response(course.to_dict(), 'Course created')), 201


@course_bp.route('/enrollments', methods=['GET'])
@login_required
def my_enrollments():
    enrollments = EnrollmentService.get_user_enrollments(current_user.user_id)
    return jsonify(success_response([enrollment.to_dict() for enrollment in enrollments]))


@course_bp.route('/<int:course_id>/enroll', methods=['POST'])
@login_required
def enroll(course_id):
    enrollment = EnrollmentService.enroll(current_user.user_id, course_id)
    return jsonify(success_response(enrollment.to_dict(), 'Enrolled'))


@course_bp.route('/<int:course_id>/enroll', methods=['DELETE'])
@login_required
def drop(course_id):
    enrollment = EnrollmentService.drop(current_user.user_id, course_id)
    return jsonify(success_response(enrollment.to_dict(), 'Enrollment dropped'))
