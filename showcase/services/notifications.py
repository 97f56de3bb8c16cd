import logging
import os
from datetime import datetime, timezone
from typing import Optional

from showcase.schemas.auth import Actor
from showcase.schemas.notification import Notification, NotificationDraft, NotificationFeed
from showcase.services.errors import Unauthorized

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = int(os.getenv("NOTIFICATION_PAGE_SIZE", "20"))


def emit(store, user_id: str, type: str, message: str, complaint_id: Optional[str] = None):
    # The sender can usually not read the recipient's notifications back, so
    # nothing is returned. Persistence errors propagate to the caller.
    store.notifications.create({
        "user_id": user_id,
        "type": type,
        "message": message,
        "complaint_id": complaint_id,
        "is_read": False,
        "created_at": datetime.now(timezone.utc),
    }, minimal=True)
    logger.info(f"Notified {user_id} ({type}): {message}")


def emit_draft(store, draft: NotificationDraft):
    return emit(store, draft.user_id, draft.type, draft.message, draft.complaint_id)


def list_recent(store, user_id: str, limit: int = DEFAULT_LIMIT) -> NotificationFeed:
    notifications = store.notifications.list_by("user_id", user_id, order_by="created_at", ascending=False, limit=limit)
    # Unread is counted inside the fetched window; past `limit` unread the badge undercounts.
    unread = sum(1 for n in notifications if not n.is_read)
    return NotificationFeed(notifications=notifications, unread_count=unread)


def mark_read(store, actor: Actor, notification_id: str) -> Notification:
    notification = store.notifications.get(notification_id)
    if not actor.owns(notification.user_id):
        raise Unauthorized("Not your notification")
    if notification.is_read:
        return notification
    return store.notifications.update(notification_id, {"is_read": True})


def mark_all_read(store, actor: Actor) -> int:
    if actor.is_anonymous:
        raise Unauthorized("Sign in to manage notifications")
    # Rows inserted while this runs may or may not be included
    updated = store.notifications.update_where({"user_id": actor.id, "is_read": False}, {"is_read": True})
    logger.info(f"Marked {len(updated)} notifications read for {actor.id}")
    return len(updated)
