# File: coursestack_app/modules/quiz/routes.py
from flask import jsonify
from flask_login import current_user, login_required

from coursestack_app.core.error_handlers import success_response
from coursestack_app.core.validation import load_json

from . import quiz_bp
from .schemas import AttemptSchema, QuizCreateIn, QuizSchema, QuizSubmissionIn, QuizUpdateIn
from .services import QuizService, QuizSubmissionService


@quiz_bp.route('/<int:course_id>/quizzes', methods=['GET'])
@login_required
def list_quizzes(course_id):
    quizzes, is_staff = QuizService.list_quizzes(current_user, course_id)
    return jsonify(success_response({
        'quizzes': [QuizSchema.dump_summary(quiz) for quiz in quizzes],
        'total': len(quizzes),
        'isInstructor': is_staff,
    }))


@quiz_bp.route('/<int:course_id>/quizzes', methods=['POST'])
@login_required
def create_quiz(course_id):
    payload = load_json(QuizCreateIn)
    quiz = QuizService.create_quiz(current_user, course_id, payload)
    return jsonify(success_response(QuizSchema.dump(quiz, include_answers=True), 'Quiz created successfully')), 201


@quiz_bp.route('/<int:course_id>/quizzes/<int:quiz_id>', methods=['GET'])
@login_required
def get_quiz(course_id, quiz_id):
    _, is_staff = QuizService.resolve_access(current_user, course_id)
    quiz = QuizService.get_quiz(course_id, quiz_id, published_only=not is_staff)

    # Learners only see correct answers when the quiz allows review
    data = QuizSchema.dump(quiz, include_answers=is_staff or quiz.show_correct_answers)
    data['studentData'] = None if is_staff else QuizService.get_student_data(current_user.user_id, quiz)
    return jsonify(success_response(data))


@quiz_bp.route('/<int:course_id>/quizzes/<int:quiz_id>', methods=['PATCH'])
@login_required
def update_quiz(course_id, quiz_id):
    payload = load_json(QuizUpdateIn)
    quiz = QuizService.update_quiz(current_user, course_id, quiz_id, payload)
    return jsonify(success_response(QuizSchema.dump_summary(quiz), 'Quiz updated successfully'))


@quiz_bp.route('/<int:course_id>/quizzes/<int:quiz_id>/submit', methods=['POST'])
@login_required
def submit_quiz(course_id, quiz_id):
    payload = load_json(QuizSubmissionIn)
    result = QuizSubmissionService.submit(
        current_user.user_id,
        course_id,
        quiz_id,
        payload.answers,
        started_at=payload.started_at,
    )
    return jsonify(result.to_dict())


@quiz_bp.route('/<int:course_id>/quizzes/<int:quiz_id>/attempts', methods=['GET'])
@login_required
def list_attempts(course_id, quiz_id):
    _, is_staff = QuizService.resolve_access(current_user, course_id)
    quiz = QuizService.get_quiz(course_id, quiz_id, published_only=not is_staff)
    attempts = QuizService.get_user_attempts(current_user.user_id, quiz.quiz_id)
    return jsonify(success_response([AttemptSchema.dump(attempt) for attempt in attempts]))


@quiz_bp.route('/<int:course_id>/quizzes/<int:quiz_id>/attempts/<int:attempt_id>', methods=['GET'])
@login_required
def get_attempt(course_id, quiz_id, attempt_id):
    attempt = QuizService.get_attempt(current_user, course_id, quiz_id, attempt_id)
    return jsonify(success_response(AttemptSchema.dump(attempt, include_answers=True)))
