"""Email notifier — renders a notification template and sends it as an email."""

import structlog

from notifications.channel.email_port import EmailPort
from notifications.channel.notifier_port import NotifierPort
from notifications.templates import get_template

logger = structlog.get_logger(__name__)


class EmailNotifier(NotifierPort):
    def __init__(self, email: EmailPort):
        self.email = email

    def notify(
        self,
        notification_type: str,
        recipient_email: str,
        recipient_name: str | None,
        data: dict,
    ) -> dict:
        template = get_template(notification_type)
        content = template.render(recipient_name or recipient_email, data)

        result = self.email.send(
            to=recipient_email,
            subject=content["subject"],
            body=content["body"],
            to_name=recipient_name,
        )
        if result.get("status") != "sent":
            logger.warning(
                "Email dispatch failed",
                notification_type=notification_type,
                recipient=recipient_email,
                error=result.get("error"),
            )
            return {"sent": False, "error": result.get("error", "Unknown email error")}

        return {"sent": True, "message_id": result.get("message_id")}
