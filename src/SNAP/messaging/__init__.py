from .push import MessageListener, NoPushService, NotificationCenter, PushService

__all__ = ["MessageListener", "NoPushService", "NotificationCenter", "PushService"]
