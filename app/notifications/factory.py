from app.config.settings import Settings
from app.notifications.base import BaseReminderNotifier
from app.notifications.log_notifier import LogReminderNotifier
from app.notifications.webhook_notifier import WebhookReminderNotifier


class ReminderNotifierFactory:
    """Creates the configured reminder notifier."""

    NOTIFIERS = ("log", "webhook")

    @classmethod
    def create(cls, settings: Settings) -> BaseReminderNotifier:
        name = settings.reminder_notifier.lower()
        if name == "log":
            return LogReminderNotifier()
        if name == "webhook":
            return WebhookReminderNotifier(
                url=settings.reminder_webhook_url.strip(),
                timeout_seconds=settings.reminder_webhook_timeout_seconds,
            )
        raise ValueError(
            f"Unknown reminder notifier '{name}'. Choose from: {list(cls.NOTIFIERS)}"
        )
