"""Order ORM Models"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from uuid import uuid4

from ...db.models import Base
from ...domain.enums import OrderStatus


class OrderModel(Base):
    __tablename__ = 'orders'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4, index=True)
    order_number = Column(String(32), unique=True, nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    customer_email = Column(String(255), nullable=False, index=True)

    status = Column(
        SQLEnum(OrderStatus, name='order_status', values_callable=lambda enum: [m.value for m in enum]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Money columns, stored in major units
    currency = Column(String(3), default='USD', nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(12, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    # Payment details
    payment_intent_id = Column(String(255), unique=True, nullable=True, index=True)
    payment_method = Column(String(50), nullable=True)

    # Shipment details
    shipping_method = Column(String(100), nullable=True)
    tracking_number = Column(String(100), nullable=True)

    # Timestamps
    paid_at = Column(DateTime(timezone=True), nullable=True)
    shipped_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    items = relationship(
        'OrderItemModel', back_populates='order', cascade='all, delete-orphan', order_by='OrderItemModel.id'
    )
    notes = relationship(
        'OrderNoteModel', back_populates='order', cascade='all, delete-orphan', order_by='OrderNoteModel.id'
    )


class OrderItemModel(Base):
    __tablename__ = 'order_items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Uuid(as_uuid=True), ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), nullable=False)
    variant_id = Column(Uuid(as_uuid=True), nullable=False)
    product_name = Column(String(255), nullable=False)
    variant_name = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)

    order = relationship('OrderModel', back_populates='items')


class OrderNoteModel(Base):
    __tablename__ = 'order_notes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Uuid(as_uuid=True), ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    author = Column(String(255), nullable=False, default='system')
    text = Column(Text, nullable=False)

    order = relationship('OrderModel', back_populates='notes')
