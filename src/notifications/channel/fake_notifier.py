"""Fake notifier — records notifications in memory for test assertions."""

from uuid import uuid4

from notifications.channel.notifier_port import NotifierPort


class FakeNotifier(NotifierPort):
    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.should_raise = False
        self.failure_reason = "Notification delivery failed"

    def configure(
        self,
        should_succeed: bool = True,
        should_raise: bool = False,
        failure_reason: str = "Notification delivery failed",
    ):
        """Configure the fake adapter behavior for testing.

        ``should_raise`` simulates a transport error instead of a reported failure.
        """
        self.should_succeed = should_succeed
        self.should_raise = should_raise
        self.failure_reason = failure_reason

    def notify(
        self,
        notification_type: str,
        recipient_email: str,
        recipient_name: str | None,
        data: dict,
    ) -> dict:
        if self.should_raise:
            raise ConnectionError(self.failure_reason)
        if not self.should_succeed:
            return {"sent": False, "error": self.failure_reason}

        message_id = f"notif-{uuid4().hex[:12]}"
        self.sent.append(
            {
                "message_id": message_id,
                "type": notification_type,
                "recipient_email": recipient_email,
                "recipient_name": recipient_name,
                "data": data,
            }
        )
        return {"sent": True, "message_id": message_id}

    def of_type(self, notification_type: str) -> list[dict]:
        return [n for n in self.sent if n["type"] == notification_type]

    def reset(self):
        """Clear recorded notifications (useful between tests)."""
        self.sent.clear()
        self.configure()
