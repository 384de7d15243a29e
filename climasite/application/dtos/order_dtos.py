"""Order DTOs for API requests and responses"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID


class OrderItemCreateDTO(BaseModel):
    """Line item submitted at checkout"""
    product_id: UUID
    variant_id: UUID
    product_name: str = Field(..., min_length=1)
    variant_name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)


class OrderCreateDTO(BaseModel):
    """Request DTO for creating an order"""
    customer_email: EmailStr
    items: List[OrderItemCreateDTO] = Field(..., min_length=1)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    shipping_cost: Decimal = Field(default=Decimal("0"), ge=0)
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    shipping_method: Optional[str] = None
    payment_intent_id: Optional[str] = None
    payment_method: Optional[str] = None


class OrderItemResponseDTO(BaseModel):
    product_id: UUID
    variant_id: UUID
    product_name: str
    variant_name: str
    sku: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderNoteResponseDTO(BaseModel):
    created_at: datetime
    author: str
    text: str


class OrderResponseDTO(BaseModel):
    """Response DTO for order data"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    user_id: Optional[UUID] = None
    customer_email: str
    status: str
    currency: str
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    payment_method: Optional[str] = None
    shipping_method: Optional[str] = None
    tracking_number: Optional[str] = None
    paid_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    notes: Optional[str] = None
    note_entries: List[OrderNoteResponseDTO] = Field(default_factory=list)
    items: List[OrderItemResponseDTO] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, order):
        """Convert domain entity to DTO"""
        return cls(
            id=order.id.value,
            order_number=order.order_number,
            user_id=order.user_id.value if order.user_id else None,
            customer_email=order.customer_email,
            status=order.status.value,
            currency=order.currency,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            tax_amount=order.tax_amount,
            discount_amount=order.discount_amount,
            total=order.total,
            payment_method=order.payment_method,
            shipping_method=order.shipping_method,
            tracking_number=order.tracking_number,
            paid_at=order.paid_at,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            notes=order.notes_text,
            note_entries=[
                OrderNoteResponseDTO(created_at=note.created_at, author=note.author, text=note.text)
                for note in order.notes
            ],
            items=[
                OrderItemResponseDTO(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    variant_name=item.variant_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponseDTO(BaseModel):
    items: List[OrderResponseDTO]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class UpdateOrderStatusDTO(BaseModel):
    """Admin request to move an order to another status"""
    status: str
    note: Optional[str] = None


class UpdateShippingInfoDTO(BaseModel):
    tracking_number: Optional[str] = None
    shipping_method: Optional[str] = None
    mark_as_shipped: bool = False


class AddOrderNoteDTO(BaseModel):
    note: str = ""


class CancelOrderDTO(BaseModel):
    cancellation_reason: Optional[str] = None


class PaymentWebhookEvent(BaseModel):
    """Payment gateway event reduced to what order reconciliation needs"""
    event_type: str
    payment_intent_id: Optional[str] = None
    event_id: Optional[str] = None
    failure_message: Optional[str] = None
    charge_id: Optional[str] = None
    amount_refunded: Optional[int] = None
