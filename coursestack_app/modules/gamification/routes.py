from flask import jsonify, request
from flask_login import current_user, login_required

from coursestack_app.core.error_handlers import success_response

from . import gamification_bp
from .services import ScoreService


@gamification_bp.route('/score', methods=['GET'])
@login_required
def my_score():
    page = request.args.get('page', 1, type=int)
    per_page = min(request.args.get('per_page', 20, type=int), 100)
    items, total = ScoreService.get_score_history(current_user.user_id, page, per_page)
    return jsonify(success_response({
        'total_score': current_user.total_score or 0,
        'history': [log.to_dict() for log in items],
        'history_total': total,
        'page': page,
    }))


@gamification_bp.route('/leaderboard', methods=['GET'])
@login_required
def leaderboard():
    limit = max(1, min(request.args.get('limit', 10, type=int), 100))
    return jsonify(success_response(ScoreService.get_leaderboard(limit)))
