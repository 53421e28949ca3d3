from flask import Blueprint, jsonify, g
from services.notification_service import (
    get_user_notifications,
    unread_count,
    mark_read,
    mark_all_read,
    delete_notification,
    NotificationNotFoundError,
    NotificationPermissionError,
)
from utils.decorators import login_required
from utils.serializers import notification_to_dict

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.route("", methods=["GET"])
@login_required
def api_notifications():
    user_id = g.current_user.id
    return jsonify({
        "notifications": [notification_to_dict(n) for n in get_user_notifications(user_id)],
        "unread_count": unread_count(user_id),
    })


@notifications_bp.route("/unread-count", methods=["GET"])
@login_required
def api_unread_count():
    return jsonify({"count": unread_count(g.current_user.id)})


@notifications_bp.route("/read-all", methods=["PATCH"])
@login_required
def api_mark_all_read():
    mark_all_read(g.current_user.id)
    return jsonify({"message": "All notifications marked as read"})


@notifications_bp.route("/<int:notification_id>/read", methods=["PATCH"])
@login_required
def api_mark_read(notification_id):
    try:
        notification = mark_read(notification_id, g.current_user.id)
    except NotificationNotFoundError:
        return jsonify({"error": "Notification not found"}), 404
    except NotificationPermissionError as e:
        return jsonify({"error": str(e)}), 403

    return jsonify({
        "message": "Notification marked as read",
        "notification": notification_to_dict(notification),
    })


@notifications_bp.route("/<int:notification_id>", methods=["DELETE"])
@login_required
def api_delete_notification(notification_id):
    try:
        delete_notification(notification_id, g.current_user.id)
    except NotificationNotFoundError:
        return jsonify({"error": "Notification not found"}), 404
    except NotificationPermissionError as e:
        return jsonify({"error": str(e)}), 403

    return jsonify({"message": "Notification deleted"})
