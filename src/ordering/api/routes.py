"""FastAPI routes for the Ordering domain — quote requests, history and notes."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddNoteRequest,
    AddressSchema,
    CreateOrderRequest,
    EditNoteRequest,
    HistoryEntryResponse,
    NoteIdResponse,
    NoteResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    StatusResponse,
    TransitionOrderRequest,
)
from ordering.order.lifecycle import OrderLifecycle, ShippingInfo
from ordering.order.notes import AddOrderNote, DeleteOrderNote, EditOrderNote, notes_for_order
from ordering.order.order import allowed_transitions

order_router = APIRouter(prefix="/orders", tags=["orders"])

lifecycle = OrderLifecycle()


def _address(value) -> AddressSchema | None:
    return AddressSchema(**value.to_payload()) if value else None


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        customer_id=str(order.customer_id),
        status=order.status,
        total_amount=order.total_amount,
        company_name=order.company_name,
        billing_address=_address(order.billing_address),
        shipping_address=_address(order.shipping_address),
        notes=order.notes,
        items=[
            OrderItemResponse(
                item_type=item.item_type,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                original_unit_price=item.original_unit_price,
                discount_percentage=item.discount_percentage,
                total_price=item.total_price,
            )
            for item in order.items
        ],
        allowed_transitions=sorted(s.value for s in allowed_transitions(order.status)),
    )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    shipping_info = ShippingInfo(
        customer_id=body.customer_id,
        customer_email=body.customer_email,
        customer_name=body.customer_name,
        company_name=body.company_name,
        billing_address=body.billing_address.model_dump() if body.billing_address else None,
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else None,
        use_different_shipping=body.use_different_shipping,
    )
    order = lifecycle.create_order([line.model_dump() for line in body.items], shipping_info, body.notes)
    return OrderIdResponse(order_id=str(order.id), order_number=order.order_number)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(lifecycle.get(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def transition_order(order_id: str, body: TransitionOrderRequest) -> OrderResponse:
    order = lifecycle.transition(
        order_id,
        body.new_status,
        notes=body.notes,
        changed_by=body.changed_by,
        changed_by_name=body.changed_by_name,
        expected_status=body.expected_status,
    )
    return _order_response(order)


@order_router.get("/{order_id}/history", response_model=list[HistoryEntryResponse])
async def get_order_history(order_id: str) -> list[HistoryEntryResponse]:
    return [
        HistoryEntryResponse(
            old_status=entry.old_status,
            new_status=entry.new_status,
            notes=entry.notes,
            changed_by_name=entry.changed_by_name,
            created_at=entry.created_at.isoformat(),
        )
        for entry in lifecycle.history(order_id)
    ]


@order_router.get("", response_model=list[OrderResponse])
async def list_customer_orders(customer_id: str) -> list[OrderResponse]:
    return [_order_response(order) for order in lifecycle.orders_for_customer(customer_id)]


# ---------------------------------------------------------------------------
# Internal notes
# ---------------------------------------------------------------------------
@order_router.post("/{order_id}/notes", status_code=201, response_model=NoteIdResponse)
async def add_note(order_id: str, body: AddNoteRequest) -> NoteIdResponse:
    command = AddOrderNote(
        order_id=order_id,
        author_id=body.author_id,
        author_name=body.author_name,
        content=body.content,
        is_admin=body.is_admin,
    )
    note_id = current_domain.process(command, asynchronous=False)
    return NoteIdResponse(note_id=note_id)


@order_router.get("/{order_id}/notes", response_model=list[NoteResponse])
async def list_notes(order_id: str, is_admin: bool = False) -> list[NoteResponse]:
    return [
        NoteResponse(
            note_id=str(note.id),
            author_id=str(note.author_id),
            author_name=note.author_name,
            content=note.content,
            edited=note.is_edited,
            created_at=note.created_at.isoformat(),
        )
        for note in notes_for_order(order_id, is_admin=is_admin)
    ]


@order_router.put("/{order_id}/notes/{note_id}", response_model=StatusResponse)
async def edit_note(order_id: str, note_id: str, body: EditNoteRequest) -> StatusResponse:  # noqa: ARG001
    command = EditOrderNote(note_id=note_id, actor_id=body.actor_id, content=body.content)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.delete("/{order_id}/notes/{note_id}", response_model=StatusResponse)
async def delete_note(order_id: str, note_id: str, actor_id: str) -> StatusResponse:  # noqa: ARG001
    command = DeleteOrderNote(note_id=note_id, actor_id=actor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
