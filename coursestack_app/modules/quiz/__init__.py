"""Quiz module: authoring, reading and graded submissions."""

from flask import Blueprint

quiz_bp = Blueprint('quiz', __name__)
