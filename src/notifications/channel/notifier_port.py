"""Notifier port — abstract interface for customer notifications."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """Abstract interface for notification adapters."""

    @abstractmethod
    def notify(
        self,
        notification_type: str,
        recipient_email: str,
        recipient_name: str | None,
        data: dict,
    ) -> dict:
        """Deliver a notification to a customer.

        Returns:
            dict with keys: sent (bool), message_id (optional), error (optional)
        """
        ...
