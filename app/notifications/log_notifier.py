from collections.abc import Sequence

from app.compliance.models import ReminderPayload
from app.logging.logger import Log
from app.notifications.base import BaseReminderNotifier


class LogReminderNotifier(BaseReminderNotifier):
    """Writes reminders to the log instead of delivering them.

    No network calls. Useful for local development and dry runs.
    """

    def send(self, payloads: Sequence[ReminderPayload]) -> int:
        for payload in payloads:
            issues = ", ".join(
                f"{issue.type} ({issue.status.value})" for issue in payload.issues
            )
            Log.info(f"Reminder for {payload.name} <{payload.email}>: {issues}")
        return len(payloads)
