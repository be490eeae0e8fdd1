"""Notifier registry — pluggable customer notification adapter.

Provides singleton access to the notifier. Uses the fake notifier by
default; an ``EmailNotifier`` over a real email adapter can be installed
with ``configure_notifier`` in production.
"""

from notifications.channel.notifier_port import NotifierPort

_notifier_instance: NotifierPort | None = None


def get_notifier() -> NotifierPort:
    """Return the configured notifier (singleton)."""
    global _notifier_instance
    if _notifier_instance is None:
        from notifications.channel.fake_notifier import FakeNotifier

        _notifier_instance = FakeNotifier()
    return _notifier_instance


def configure_notifier(notifier: NotifierPort) -> None:
    global _notifier_instance
    _notifier_instance = notifier


def reset_notifier():
    """Reset the notifier singleton (useful for testing)."""
    global _notifier_instance
    _notifier_instance = None
