from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.compliance.models import ReminderPayload


def reminder_to_dict(payload: ReminderPayload) -> dict[str, object]:
    """JSON-ready form of a reminder, using the camelCase keys of stored records."""
    return {
        "email": payload.email,
        "name": payload.name,
        "issues": [
            {
                "type": issue.type,
                "status": issue.status.value,
                "documentName": issue.document_name,
            }
            for issue in payload.issues
        ],
    }


class BaseReminderNotifier(ABC):
    """Contract for reminder delivery adapters."""

    @abstractmethod
    def send(self, payloads: Sequence[ReminderPayload]) -> int:
        """Deliver reminders and return how many were sent.

        Raises:
            NotificationError: on any delivery failure.
        """
