"""Tests for courses and enrollments."""

from coursestack_app import db
from coursestack_app.models import Course, Enrollment, User


class TestCourses:

    def test_instructor_creates_course(self, client, login_client, user_factory):
        instructor = user_factory('prof', role=User.ROLE_INSTRUCTOR)
        login_client(client, instructor)

        response = client.post('/api/courses', json={'title': 'Algorithms', 'isPublished': True})

        assert response.status_code == 201
        course = db.session.get(Course, response.get_json()['data']['course_id'])
        assert course.instructor_id == instructor.user_id

    def test_student_cannot_create_course(self, client, login_client, user_factory):
        login_client(client, user_factory('pupil'))
        response = client.post('/api/courses', json={'title': 'Nope'})
        assert response.status_code == 403

    def test_list_only_published(self, client, login_client, seeded_course):
        db.session.add(Course(title='Draft', instructor_id=seeded_course['instructor'].user_id))
        db.session.commit()
        login_client(client, seeded_course['student'])

        titles = [course['title'] for course in client.get('/api/courses').get_json()['data']]

        assert titles == ['Python Basics']


class TestEnrollment:

    def test_enroll_is_idempotent(self, client, login_client, seeded_course, user_factory):
        course = seeded_course['course']
        learner = user_factory('learner')
        login_client(client, learner)

        assert client.post(f'/api/courses/{course.course_id}/enroll').status_code == 200
        assert client.post(f'/api/courses/{course.course_id}/enroll').status_code == 200
        assert Enrollment.query.filter_by(user_id=learner.user_id).count() == 1

    def test_drop_and_reenroll(self, client, login_client, seeded_course):
        course, student = seeded_course['course'], seeded_course['student']
        login_client(client, student)

        response = client.delete(f'/api/courses/{course.course_id}/enroll')
        assert response.get_json()['data']['status'] == Enrollment.STATUS_DROPPED

        response = client.post(f'/api/courses/{course.course_id}/enroll')
        assert response.get_json()['data']['status'] == Enrollment.STATUS_ACTIVE

        enrollments = client.get('/api/courses/enrollments').get_json()['data']
        assert len(enrollments) == 1

    def test_cannot_enroll_in_unpublished(self, client, login_client, seeded_course):
        draft = Course(title='Draft', instructor_id=seeded_course['instructor'].user_id)
        db.session.add(draft)
        db.session.commit()
        login_client(client, seeded_course['student'])

        assert client.post(f'/api/courses/{draft.course_id}/enroll').status_code == 404
