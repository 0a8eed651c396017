from .services.enrollment_service import EnrollmentService


def get_course(course_id: int):
    """Public API: course or NotFoundError."""
    return EnrollmentService.get_course(course_id)


def is_enrolled(user_id: int, course_id: int) -> bool:
    """Public API: does the user hold an ACTIVE or COMPLETED enrollment."""
    return EnrollmentService.is_enrolled(user_id, course_id)


def is_course_staff(user, course) -> bool:
    return EnrollmentService.is_course_staff(user, course)
