from collections.abc import Sequence

import httpx

from app.compliance.models import ReminderPayload
from app.logging.logger import Log
from app.notifications.base import BaseReminderNotifier, reminder_to_dict
from app.notifications.exceptions import NotificationError, NotificationNetworkError


class WebhookReminderNotifier(BaseReminderNotifier):
    """Posts reminders as one JSON batch to an HTTP endpoint (e.g. an email relay)."""

    def __init__(
        self,
        *,
        url: str,
        timeout_seconds: int,
        client: httpx.Client | None = None,
    ) -> None:
        if not url:
            raise NotificationError("Webhook URL is required for webhook reminders")
        self._url = url
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def send(self, payloads: Sequence[ReminderPayload]) -> int:
        if not payloads:
            return 0
        body = {"reminders": [reminder_to_dict(p) for p in payloads]}
        try:
            response = self._client.post(self._url, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotificationNetworkError(
                f"Reminder webhook returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationNetworkError(f"Reminder webhook network error: {exc}") from exc

        Log.info(f"Posted {len(payloads)} reminders to webhook")
        return len(payloads)
