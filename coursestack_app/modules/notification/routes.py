from flask import jsonify, request
from flask_login import current_user, login_required

from coursestack_app.core.error_handlers import NotFoundError

from . import notification_bp
from .services import NotificationService


@notification_bp.route('', methods=['GET'])
@login_required
def api_get_notifications():
    limit = max(1, min(request.args.get('limit', 20, type=int), 100))
    offset = max(0, request.args.get('offset', 0, type=int))

    notifs = NotificationService.get_user_notifications(current_user.user_id, limit, offset)
    unread_count = NotificationService.get_unread_count(current_user.user_id)

    return jsonify({
        'success': True,
        'notifications': [n.to_dict() for n in notifs],
        'unread_count': unread_count
    })


@notification_bp.route('/<int:notif_id>/read', methods=['POST'])
@login_required
def api_mark_read(notif_id):
    if not NotificationService.mark_as_read(notif_id, current_user.user_id):
        raise NotFoundError('Notification not found', resource='notification')
    return jsonify({'success': True})


@notification_bp.route('/read-all', methods=['POST'])
@login_required
def api_mark_all_read():
    updated = NotificationService.mark_all_as_read(current_user.user_id)
    return jsonify({'success': True, 'updated': updated})
