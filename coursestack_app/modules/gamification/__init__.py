from flask import Blueprint

gamification_bp = Blueprint('gamification', __name__)
