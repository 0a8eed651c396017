# File: coursestack_app/modules/auth/routes.py
from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from ...core.error_handlers import AuthenticationError, ConflictError, ValidationError, success_response
from ...core.extensions import db
from ...core.signals import user_registered
from ...models import User
from ..notification.interface import get_unread_count
from . import auth_bp
from .forms import LoginForm, RegistrationForm


@auth_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    """Token for the X-CSRFToken header on state-changing requests."""
    return jsonify({'csrf_token': generate_csrf()})


@auth_bp.route('/register', methods=['POST'])
def register():
    form = RegistrationForm()
    if not form.validate_on_submit():
        raise ValidationError('Invalid registration data', errors=form.errors)

    user = User(
        username=form.username.data,
        email=form.email.data.lower(),
        user_role=User.ROLE_STUDENT,
    )
    user.set_password(form.password.data)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.session.rollback()
        raise ConflictError('Username or email already registered')
    current_app.logger.info("Registered user %s (%s)", user.user_id, user.username)

    user_registered.send(current_app._get_current_object(), user=user)
    login_user(user)
    return jsonify(success_response(user.to_dict(), 'Registration successful')), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError('Invalid login data', errors=form.errors)

    identifier = form.username.data.strip()
    user = User.query.filter(
        or_(User.username == identifier, func.lower(User.email) == identifier.lower())
    ).first()
    if user is None or not user.check_password(form.password.data):
        current_app.logger.warning("Failed login for %r", identifier)
        raise AuthenticationError('Invalid username or password')

    login_user(user)
    return jsonify(success_response(user.to_dict(), 'Login successful'))


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify(success_response(message='Logged out'))


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    data = current_user.to_dict()
    data['unread_notifications'] = get_unread_count(current_user.user_id)
    return jsonify(success_response(data))
