"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), kept separate from
internal Protean commands.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str
    city: str
    postal_code: str
    country: str | None = None


class CartLineSchema(BaseModel):
    """One line of a reconciled cart snapshot."""

    item_type: Literal["product", "vehicle"] = "product"
    item_id: str
    name: str
    quantity: int = Field(default=1, ge=1)
    price: float = Field(ge=0)
    discount_percentage: float | None = None
    tax_rate: float | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    customer_id: str
    customer_email: str
    customer_name: str | None = None
    company_name: str | None = None
    items: list[CartLineSchema]
    billing_address: AddressSchema | None = None
    shipping_address: AddressSchema | None = None
    use_different_shipping: bool = False
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "customer_email": "einkauf@example.de",
                    "customer_name": "Erika Mustermann",
                    "company_name": "Mustermann Logistik GmbH",
                    "items": [
                        {
                            "item_type": "product",
                            "item_id": "prod-001",
                            "name": "Brake pad set",
                            "quantity": 3,
                            "price": 100.0,
                            "discount_percentage": 10.0,
                        }
                    ],
                    "billing_address": {
                        "street": "Hauptstr. 1",
                        "city": "Berlin",
                        "postal_code": "10115",
                        "country": "DE",
                    },
                    "notes": "Delivery before noon please",
                }
            ]
        }
    }


class TransitionOrderRequest(BaseModel):
    new_status: str
    notes: str | None = None
    changed_by: str | None = None
    changed_by_name: str | None = None
    expected_status: str | None = None


class AddNoteRequest(BaseModel):
    author_id: str
    author_name: str | None = None
    content: str
    is_admin: bool = False


class EditNoteRequest(BaseModel):
    actor_id: str
    content: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str
    order_number: str


class NoteIdResponse(BaseModel):
    note_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    item_type: str
    product_name: str
    quantity: int
    unit_price: float
    original_unit_price: float | None = None
    discount_percentage: float | None = None
    total_price: float


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    customer_id: str
    status: str
    total_amount: float
    company_name: str | None = None
    billing_address: AddressSchema | None = None
    shipping_address: AddressSchema | None = None
    notes: str | None = None
    items: list[OrderItemResponse]
    allowed_transitions: list[str]


class HistoryEntryResponse(BaseModel):
    old_status: str | None = None
    new_status: str
    notes: str | None = None
    changed_by_name: str | None = None
    created_at: str


class NoteResponse(BaseModel):
    note_id: str
    author_id: str
    author_name: str | None = None
    content: str
    edited: bool
    created_at: str
