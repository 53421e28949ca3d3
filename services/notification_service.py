from models import db, Notification


class NotificationNotFoundError(Exception):
    """Raised when a notification is not found"""
    pass


class NotificationPermissionError(Exception):
    """Raised when a user touches someone else's notification"""
    pass


def notify_member(member, type, title, message, data=None):
    """
    Queue a notification for the login linked to ``member``. Members without
    a login are skipped. The caller commits.
    """
    if member is None or member.user_id is None:
        return None

    notification = Notification(
        user_id=member.user_id,
        member_id=member.id,
        type=type,
        title=title,
        message=message,
        data=data or {},
    )
    db.session.add(notification)
    return notification


def get_user_notifications(user_id, limit=100):
    return (
        Notification.query
        .filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def unread_count(user_id):
    return Notification.query.filter_by(user_id=user_id, read=False).count()


def _get_owned(notification_id, user_id):
    notification = db.session.get(Notification, notification_id)
    if not notification:
        raise NotificationNotFoundError(f"Notification {notification_id} not found")
    if notification.user_id != user_id:
        raise NotificationPermissionError("Forbidden")
    return notification


def mark_read(notification_id, user_id):
    notification = _get_owned(notification_id, user_id)
    notification.read = True
    db.session.commit()
    return notification


def mark_all_read(user_id):
    updated = (
        Notification.query
        .filter_by(user_id=user_id, read=False)
        .update({"read": True})
    )
    db.session.commit()
    return updated


def delete_notification(notification_id, user_id):
    notification = _get_owned(notification_id, user_id)
    db.session.delete(notification)
    db.session.commit()
