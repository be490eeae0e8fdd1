"""Tests for notification channel adapters and the notifier registry."""

import pytest
from notifications.channel import configure_notifier, get_notifier, reset_notifier
from notifications.channel.email_notifier import EmailNotifier
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.fake_notifier import FakeNotifier

DATA = {"order_number": "ANF-20240309-1A2B3C", "items": [], "total_amount": 0.0}


class TestFakeNotifier:
    def setup_method(self):
        self.notifier = FakeNotifier()

    def test_notify_records_message(self):
        result = self.notifier.notify("order_confirmed", "a@b.com", "Alice", DATA)
        assert result["sent"] is True
        assert result["message_id"] is not None
        assert self.notifier.sent[0]["recipient_email"] == "a@b.com"

    def test_reported_failure(self):
        self.notifier.configure(should_succeed=False, failure_reason="bounced")
        result = self.notifier.notify("order_confirmed", "a@b.com", "Alice", DATA)
        assert result == {"sent": False, "error": "bounced"}
        assert self.notifier.sent == []

    def test_raising_failure(self):
        self.notifier.configure(should_raise=True)
        with pytest.raises(ConnectionError):
            self.notifier.notify("order_confirmed", "a@b.com", "Alice", DATA)

    def test_of_type_and_reset(self):
        self.notifier.notify("order_confirmed", "a@b.com", None, DATA)
        self.notifier.notify("order_shipped", "a@b.com", None, DATA)
        assert len(self.notifier.of_type("order_shipped")) == 1
        self.notifier.reset()
        assert self.notifier.sent == []


class TestEmailNotifier:
    def setup_method(self):
        self.email = FakeEmailAdapter()
        self.notifier = EmailNotifier(self.email)

    def test_renders_and_sends(self):
        result = self.notifier.notify("order_shipped", "a@b.com", "Alice", DATA)
        assert result["sent"] is True
        [message] = self.email.outbox
        assert message["to"] == "a@b.com"
        assert message["to_name"] == "Alice"
        assert message["subject"] == "Shipping confirmation - ANF-20240309-1A2B3C"
        assert message["body"].startswith("Dear Alice")

    def test_falls_back_to_email_for_name(self):
        self.notifier.notify("order_delivered", "a@b.com", None, DATA)
        assert self.email.outbox[0]["body"].startswith("Dear a@b.com")

    def test_email_failure_is_reported(self):
        self.email.configure(should_succeed=False, failure_reason="SMTP error")
        result = self.notifier.notify("order_shipped", "a@b.com", "Alice", DATA)
        assert result == {"sent": False, "error": "SMTP error"}


class TestNotifierRegistry:
    def test_defaults_to_fake_singleton(self):
        reset_notifier()
        assert isinstance(get_notifier(), FakeNotifier)
        assert get_notifier() is get_notifier()

    def test_configure_installs_adapter(self):
        notifier = EmailNotifier(FakeEmailAdapter())
        configure_notifier(notifier)
        assert get_notifier() is notifier
        reset_notifier()
