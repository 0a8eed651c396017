import os
import sys

import pytest
from flask import g

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from coursestack_app import create_app, db
from coursestack_app.core.config import Config
from coursestack_app.models import (
    CorrectAnswer,
    Course,
    Enrollment,
    Question,
    QuestionOption,
    Quiz,
    User,
)


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    LOG_DIR = None
    SEED_DEFAULT_ADMIN = False


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_client():
    return _login_client


def _login_client(client, user):
    """Mark `client` as logged in as `user` the way Flask-Login stores it."""
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user.user_id)
        sess['_fresh'] = True
    # Requests share the fixture's app context, so drop the cached user
    g.pop('_login_user', None)


@pytest.fixture
def user_factory(app):
    return _make_user


def _make_user(username, role=User.ROLE_STUDENT, password='password123'):
    user = User(username=username, email=f'{username}@example.com', user_role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def seeded_course(app):
    """A published course with its instructor and one enrolled student."""
    instructor = _make_user('instructor', role=User.ROLE_INSTRUCTOR)
    student = _make_user('student')
    course = Course(title='Python Basics', instructor_id=instructor.user_id, is_published=True)
    db.session.add(course)
    db.session.flush()
    db.session.add(Enrollment(user_id=student.user_id, course_id=course.course_id))
    db.session.commit()
    return {'instructor': instructor, 'student': student, 'course': course}


@pytest.fixture
def quiz_factory(app):
    return _build_quiz


def _build_quiz(course, passing_score=70, attempts_allowed=0, is_published=True, show_correct_answers=False):
    """
    Quiz with one question of each type:
        MULTIPLE_CHOICE (2 pts): correct options 'Paris' and 'Lyon'
        TRUE_FALSE (1 pt): the statement is true
        FILL_BLANK (1 pt): 'Python' or 'CPython'
        SHORT_ANSWER (1 pt): keywords 'garbage collection memory'
        MATCHING (1 pt): Dog->Bark, Cat->Meow
    Returns (quiz, ids) where ids maps readable names to database ids.
    """
    quiz = Quiz(
        course_id=course.course_id,
        title='Mixed quiz',
        passing_score=passing_score,
        attempts_allowed=attempts_allowed,
        is_published=is_published,
        show_correct_answers=show_correct_answers,
    )

    mc = Question(question_type='MULTIPLE_CHOICE', text='French cities?', points=2, position=0)
    paris = QuestionOption(option_text='Paris', position=0)
    berlin = QuestionOption(option_text='Berlin', position=1)
    lyon = QuestionOption(option_text='Lyon', position=2)
    mc.options.extend([paris, berlin, lyon])
    mc.correct_answers.extend([CorrectAnswer(option=paris), CorrectAnswer(option=lyon)])

    tf = Question(question_type='TRUE_FALSE', text='Python is dynamically typed.', points=1, position=1)
    tf.correct_answers.append(CorrectAnswer())

    fill = Question(question_type='FILL_BLANK', text='The reference interpreter is ___.', points=1, position=2)
    fill.correct_answers.extend([CorrectAnswer(answer_text='Python'), CorrectAnswer(answer_text='CPython')])

    short = Question(question_type='SHORT_ANSWER', text='What does the GC do?', points=1, position=3)
    short.correct_answers.append(CorrectAnswer(answer_text='garbage collection memory'))

    match = Question(question_type='MATCHING', text='Match the sounds.', points=1, position=4)
    dog = QuestionOption(option_text='Dog', position=0)
    cat = QuestionOption(option_text='Cat', position=1)
    bark = QuestionOption(option_text='Bark', position=2)
    meow = QuestionOption(option_text='Meow', position=3)
    match.options.extend([dog, cat, bark, meow])
    match.correct_answers.extend([
        CorrectAnswer(option=dog, match_option=bark),
        CorrectAnswer(option=cat, match_option=meow),
    ])

    quiz.questions.extend([mc, tf, fill, short, match])
    db.session.add(quiz)
    db.session.commit()

    ids = {
        'mc': mc.question_id,
        'tf': tf.question_id,
        'fill': fill.question_id,
        'short': short.question_id,
        'match': match.question_id,
        'paris': paris.option_id,
        'berlin': berlin.option_id,
        'lyon': lyon.option_id,
        'dog': dog.option_id,
        'cat': cat.option_id,
        'bark': bark.option_id,
        'meow': meow.option_id,
    }
    return quiz, ids


@pytest.fixture
def correct_answers():
    return _all_correct_answers


def _all_correct_answers(ids):
    return [
        {'questionId': ids['mc'], 'answer': [ids['lyon'], ids['paris']]},
        {'questionId': ids['tf'], 'answer': True},
        {'questionId': ids['fill'], 'answer': '  cpython '},
        {'questionId': ids['short'], 'answer': 'It frees memory through garbage collection.'},
        {'questionId': ids['match'], 'answer': [
            {'itemId': ids['cat'], 'matchId': ids['meow']},
            {'itemId': ids['dog'], 'matchId': ids['bark']},
        ]},
    ]
