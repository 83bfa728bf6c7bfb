from cleanconnect.notifications.dispatcher import NotificationDispatcher

__all__ = ["NotificationDispatcher"]
