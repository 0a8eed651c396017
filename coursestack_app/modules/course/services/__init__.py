from .enrollment_service import EnrollmentService

__all__ = ['EnrollmentService']
