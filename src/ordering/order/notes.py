"""Internal order notes — administrator annotations on a quote request.

Notes sit beside the state machine: adding, editing or deleting one never
changes the order status and never notifies the customer. Only
administrators may add or read notes, and only the author may edit or
delete a note.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import NotAuthorized
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def _clean_content(content) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": ["Note content cannot be empty"]})
    return content


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@ordering.aggregate
class OrderNote:
    order_id = Identifier(required=True)
    author_id = Identifier(required=True)
    author_name = String(max_length=255)
    content = Text(required=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def write(cls, order_id, author_id, author_name, content):
        now = datetime.now(UTC)
        return cls(
            order_id=str(order_id),
            author_id=str(author_id),
            author_name=author_name,
            content=_clean_content(content),
            created_at=now,
            updated_at=now,
        )

    def ensure_author(self, actor_id):
        if str(actor_id) != str(self.author_id):
            raise NotAuthorized("Only the author of a note may change it")

    def edit(self, actor_id, content):
        self.ensure_author(actor_id)
        self.content = _clean_content(content)
        self.updated_at = datetime.now(UTC)

    @property
    def is_edited(self) -> bool:
        return self.updated_at != self.created_at


@ordering.repository(part_of=OrderNote)
class OrderNoteRepository:
    def for_order(self, order_id) -> list[OrderNote]:
        """Notes of an order, oldest first."""
        notes = self._dao.query.filter(order_id=str(order_id)).all().items
        return sorted(notes, key=lambda note: note.created_at)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@ordering.command(part_of=OrderNote)
class AddOrderNote:
    order_id = Identifier(required=True)
    author_id = Identifier(required=True)
    author_name = String(max_length=255)
    content = Text(required=True)
    is_admin = Boolean(default=False)


@ordering.command(part_of=OrderNote)
class EditOrderNote:
    note_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    content = Text(required=True)


@ordering.command(part_of=OrderNote)
class DeleteOrderNote:
    note_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@ordering.command_handler(part_of=OrderNote)
class OrderNoteCommandHandler:
    @handle(AddOrderNote)
    def add_note(self, command):
        if not command.is_admin:
            raise NotAuthorized("Only administrators may add order notes")

        # Raises ObjectNotFoundError for unknown orders
        current_domain.repository_for(Order).get(command.order_id)

        note = OrderNote.write(command.order_id, command.author_id, command.author_name, command.content)
        current_domain.repository_for(OrderNote).add(note)
        logger.info("Order note added", order_id=str(command.order_id), note_id=str(note.id))
        return str(note.id)

    @handle(EditOrderNote)
    def edit_note(self, command):
        repo = current_domain.repository_for(OrderNote)
        note = repo.get(command.note_id)
        note.edit(command.actor_id, command.content)
        repo.add(note)

    @handle(DeleteOrderNote)
    def delete_note(self, command):
        repo = current_domain.repository_for(OrderNote)
        note = repo.get(command.note_id)
        note.ensure_author(command.actor_id)
        repo._dao.delete(note)
        logger.info("Order note deleted", order_id=str(note.order_id), note_id=str(note.id))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def notes_for_order(order_id, is_admin=False) -> list[OrderNote]:
    if not is_admin:
        raise NotAuthorized("Only administrators may read order notes")
    return current_domain.repository_for(OrderNote).for_order(order_id)
