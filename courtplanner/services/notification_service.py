from typing import List, Optional, Protocol

from courtplanner.core.logger import setup_logger
from courtplanner.models.notification_model import Notification, NotificationEvent
from courtplanner.services.errors import AuthorizationError, NotFoundError
from courtplanner.services.storage_service import NOTIFICATIONS, JsonCollectionStore

logger = setup_logger(__name__)

# Events the sender triggered themselves; they arrive already read
SELF_EVENTS = {"challenge-sent-ack"}


class Notifier(Protocol):
    def notify(self, recipient: str, event: NotificationEvent) -> None:
        ...


def deliver(notifier: Optional[Notifier], recipient: str, event: NotificationEvent) -> None:
    """Fire and forget: a failing notifier is logged and never undoes the caller's change."""
    if notifier is None:
        return
    try:
        notifier.notify(recipient, event)
    except Exception as e:
        logger.error(f"Could not deliver {event.kind} to {recipient}: {e}")


class NotificationService:
    """Per-player inbox kept in the notifications collection, newest first."""

    def __init__(self, store: JsonCollectionStore):
        self.store = store
        self.notifications: List[Notification] = [
            Notification(**n) for n in (store.load(NOTIFICATIONS, []) or [])
        ]

    def _save(self) -> None:
        self.store.save(NOTIFICATIONS, [n.model_dump(mode="json") for n in self.notifications])

    def notify(self, recipient: str, event: NotificationEvent) -> Notification:
        notification = Notification(recipient=recipient, event=event, read=event.kind in SELF_EVENTS)
        self.notifications.insert(0, notification)
        self._save()
        return notification

    def get_user_notifications(self, player_name: str, skip: int = 0, limit: int = 100) -> List[Notification]:
        mine = [n for n in self.notifications if n.recipient == player_name]
        return mine[skip:skip + limit]

    def unread_count(self, player_name: str) -> int:
        return sum(1 for n in self.notifications if n.recipient == player_name and not n.read)

    def mark_notification_as_read(self, notification_id: str, player_name: str) -> Notification:
        notification = next((n for n in self.notifications if n.id == notification_id), None)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.recipient != player_name:
            raise AuthorizationError("Not authorized to mark this notification as read")
        if not notification.read: # Avoid an unnecessary write if already read
            notification.read = True
            self._save()
        return notification

    def mark_all_user_notifications_as_read(self, player_name: str) -> List[Notification]:
        unread = [n for n in self.notifications if n.recipient == player_name and not n.read]
        if not unread:
            return []
        for notification in unread:
            notification.read = True
        self._save()
        return unread

    def reload(self) -> None:
        self.notifications = [Notification(**n) for n in (self.store.load(NOTIFICATIONS, []) or [])]
