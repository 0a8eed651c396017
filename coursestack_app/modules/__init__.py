"""Feature modules of the CourseStack app."""
