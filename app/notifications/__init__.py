from app.notifications.base import BaseReminderNotifier
from app.notifications.factory import ReminderNotifierFactory

__all__ = ["BaseReminderNotifier", "ReminderNotifierFactory"]
