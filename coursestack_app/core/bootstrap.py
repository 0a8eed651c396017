"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

from flask import Flask
from flask.logging import default_handler
from sqlalchemy import or_

from .error_handlers import AuthenticationError, error_response
from .extensions import csrf_protect, db, login_manager, migrate
from .logging_config import setup_logging
from .module_registry import connect_event_modules, register_modules


def configure_logging(app: Flask) -> None:
    """Route the Flask app logger through the shared CourseStack handlers."""

    logger = setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=None if app.testing else app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
    )

    app.logger.removeHandler(default_handler)
    app.logger.handlers.clear()
    app.logger.setLevel(logger.level)
    for handler in logger.handlers:
        app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf_protect.init_app(app)

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response(AuthenticationError().message, 'UNAUTHENTICATED', 401)


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_modules(app)


def register_event_handlers(app: Flask) -> None:
    """Import modules whose signal receivers connect on import."""

    connect_event_modules(app)


def initialize_database(app: Flask) -> None:
    """Create database tables and ensure the default data exists."""

    from ..models import User

    db.create_all()

    if not app.config.get("SEED_DEFAULT_ADMIN", True):
        return

    admin_user = User.query.filter(
        or_(
            User.user_role == User.ROLE_ADMIN,
            User.username == app.config["DEFAULT_ADMIN_USERNAME"],
            User.email == app.config["DEFAULT_ADMIN_EMAIL"],
        )
    ).first()
    if admin_user is None:
        admin = User(
            username=app.config["DEFAULT_ADMIN_USERNAME"],
            email=app.config["DEFAULT_ADMIN_EMAIL"],
            user_role=User.ROLE_ADMIN,
        )
        admin.set_password(app.config["DEFAULT_ADMIN_PASSWORD"])
        db.session.add(admin)
        db.session.commit()
        app.logger.info("Created default admin user.")
    else:
        app.logger.info("Admin user already present, skipping default seed.")
