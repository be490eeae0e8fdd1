"""Tests for the OrderNote aggregate — authorship rules and content validation."""

import pytest
from ordering.errors import NotAuthorized
from ordering.order.notes import OrderNote
from protean.exceptions import ValidationError


def _note(content="Customer prefers delivery on Fridays"):
    return OrderNote.write(order_id="ord-001", author_id="admin-1", author_name="Anna Admin", content=content)


def test_write_strips_content():
    note = _note("  Called the customer  ")
    assert note.content == "Called the customer"
    assert note.is_edited is False


def test_blank_content_is_rejected():
    with pytest.raises(ValidationError) as exc:
        _note("   ")
    assert "content" in exc.value.messages


def test_author_can_edit():
    note = _note()
    note.edit("admin-1", "Updated")
    assert note.content == "Updated"
    assert note.is_edited is True


def test_other_actor_cannot_edit():
    note = _note()
    with pytest.raises(NotAuthorized):
        note.edit("admin-2", "Hijacked")
    assert note.content == "Customer prefers delivery on Fridays"


def test_ensure_author():
    note = _note()
    note.ensure_author("admin-1")
    with pytest.raises(NotAuthorized):
        note.ensure_author("someone-else")
