# File: coursestack_app/modules/auth/forms.py
# Forms for login and registration. They also accept JSON bodies.

from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, EqualTo, Length, Regexp, ValidationError

from ...models import User


class LoginForm(FlaskForm):
    """
    Login form. `username` may also hold the account's email.
    """
    username = StringField('Username', validators=[DataRequired(message="Username is required.")])
    password = PasswordField('Password', validators=[DataRequired(message="Password is required.")])


class RegistrationForm(FlaskForm):
    """
    Registration form.
    """
    username = StringField('Username', validators=[
        DataRequired(message="Username is required."),
        Length(min=3, max=80),
        Regexp(r'^[\w.-]+$', message="Username may only contain letters, digits, '.', '_' and '-'."),
    ])
    email = StringField('Email', validators=[
        DataRequired(message="Email is required."),
        Length(max=120),
        Regexp(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', message="Invalid email address."),
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message="Password is required."),
        Length(min=8, message="Password must be at least 8 characters."),
    ])
    password2 = PasswordField(
        'Repeat password',
        validators=[DataRequired(message="Please confirm the password."), EqualTo('password', message='Passwords do not match.')],
    )

    def validate_username(self, username):
        if User.query.filter_by(username=username.data).first() is not None:
            raise ValidationError('This username is already taken.')

    def validate_email(self, email):
        if User.query.filter_by(email=email.data.lower()).first() is not None:
            raise ValidationError('This email is already registered.')
