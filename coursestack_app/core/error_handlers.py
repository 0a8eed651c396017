"""
Error Handlers for CourseStack

Provides:
- Custom exception classes
- Consistent error response format
- Flask error handlers
"""

from flask import jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, Dict, Any

from .extensions import db


class CourseStackError(Exception):
    """Base exception class for CourseStack."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        payload = {
            'success': False,
            'error': self.message,
            'code': self.code,
        }
        if self.details:
            payload['details'] = self.details
        return payload


class AuthenticationError(CourseStackError):
    """No valid session."""

    def __init__(self, message: str = 'Unauthorized'):
        super().__init__(message=message, code='UNAUTHENTICATED', status_code=401)


class AuthorizationError(CourseStackError):
    """Access denied."""

    def __init__(self, message: str = 'Access denied', code: str = 'FORBIDDEN'):
        super().__init__(message=message, code=code, status_code=403)


class NotEnrolledError(AuthorizationError):
    """Caller has no active enrollment in the course."""

    def __init__(self, message: str = 'You must be enrolled in this course'):
        super().__init__(message=message, code='NOT_ENROLLED')


class AttemptLimitError(AuthorizationError):
    """Caller used up the attempts a quiz allows."""

    def __init__(self, message: str = 'Maximum attempts reached for this quiz'):
        super().__init__(message=message, code='ATTEMPT_LIMIT_REACHED')


class NotFoundError(CourseStackError):
    """Resource not found."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(CourseStackError):
    """Input validation failed."""

    def __init__(self, message: str = 'Validation failed', errors: Any = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


class ConflictError(CourseStackError):
    """Resource already exists."""

    def __init__(self, message: str = 'Resource already exists'):
        super().__init__(message=message, code='CONFLICT', status_code=409)


class PersistenceError(CourseStackError):
    """Unexpected store failure. Details stay in the server log."""

    def __init__(self, message: str = 'Internal server error'):
        super().__init__(message=message, code='SERVER_ERROR', status_code=500)


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """Create a standardized error response."""
    response = {
        'success': False,
        'error': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(CourseStackError)
    def handle_coursestack_error(error):
        log = current_app.logger.warning if error.status_code < 500 else current_app.logger.error
        log("%s: %s (%s %s)", error.code, error.message, request.method, request.path)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        current_app.logger.exception('Database error while handling %s %s', request.method, request.path)
        return error_response('Internal server error', 'SERVER_ERROR', 500)

    @app.errorhandler(404)
    def handle_not_found(error):
        if request.path.startswith('/api/'):
            return error_response('Endpoint not found', 'NOT_FOUND', 404)
        return error

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        if request.path.startswith('/api/'):
            return error_response('Method not allowed', 'METHOD_NOT_ALLOWED', 405)
        return error

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if request.path.startswith('/api/'):
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error
