"""Blueprint and signal-receiver registration for the CourseStack modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """A module's routes blueprint, given as `<package>.routes:<attribute>`."""

    blueprint_path: str
    url_prefix: str

    def load_blueprint(self) -> Blueprint:
        blueprint = import_string(self.blueprint_path)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(f"{self.blueprint_path} is {type(blueprint).__name__}, not a Blueprint")
        return blueprint


API_MODULES: Sequence[ModuleDefinition] = (
    ModuleDefinition("coursestack_app.modules.auth.routes:auth_bp", "/api/auth"),
    ModuleDefinition("coursestack_app.modules.course.routes:course_bp", "/api/courses"),
    # Quiz URLs nest under their course
    ModuleDefinition("coursestack_app.modules.quiz.routes:quiz_bp", "/api/courses"),
    ModuleDefinition("coursestack_app.modules.gamification.routes:gamification_bp", "/api/gamification"),
    ModuleDefinition("coursestack_app.modules.notification.routes:notification_bp", "/api/notifications"),
)

# events.py modules connect their receivers on import
EVENT_MODULES: Sequence[str] = (
    "coursestack_app.modules.quiz.events",
    "coursestack_app.modules.gamification.events",
)


def register_modules(app: Flask, modules: Sequence[ModuleDefinition] = API_MODULES) -> None:
    for module in modules:
        app.register_blueprint(module.load_blueprint(), url_prefix=module.url_prefix)
        app.logger.debug("Registered %s at %s", module.blueprint_path, module.url_prefix)


def connect_event_modules(app: Flask, import_paths: Sequence[str] = EVENT_MODULES) -> None:
    for import_path in import_paths:
        import_string(import_path)
        app.logger.debug("Connected signal receivers from %s", import_path)
