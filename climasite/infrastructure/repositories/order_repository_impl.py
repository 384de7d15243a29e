"""Order repository implementation using SQLAlchemy ORM"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import extract, or_
from sqlalchemy.orm import Session, selectinload

from ...domain.entities.order import Order, OrderItem, OrderNote
from ...domain.repositories.order_repository import IOrderRepository
from ...domain.value_objects.entity_ids import OrderId, UserId
from ...domain.enums import OrderStatus
from ..orm.order_model import OrderModel, OrderItemModel, OrderNoteModel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OrderRepositoryImpl(IOrderRepository):
    """Repository implementation for Order aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _query(self, for_update: bool = False):
        query = self.session.query(OrderModel).options(
            selectinload(OrderModel.items),
            selectinload(OrderModel.notes),
        )
        if for_update:
            query = query.with_for_update()
        return query

    async def get_by_id(self, order_id: OrderId, for_update: bool = False) -> Optional[Order]:
        """Get order by ID"""
        model = self._query(for_update).filter(OrderModel.id == order_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        """Get order by its human readable number"""
        model = self._query().filter(OrderModel.order_number == order_number).first()
        return self._map_to_entity(model) if model else None

    async def get_by_payment_intent_id(self, payment_intent_id: str, for_update: bool = False) -> Optional[Order]:
        """Get order by payment gateway reference"""
        if not payment_intent_id:
            return None
        model = self._query(for_update).filter(OrderModel.payment_intent_id == payment_intent_id).first()
        return self._map_to_entity(model) if model else None

    async def get_by_user_id(self, user_id: UserId) -> List[Order]:
        """Get orders by user ID"""
        models = (
            self._query()
            .filter(OrderModel.user_id == user_id.value)
            .order_by(OrderModel.created_at.desc())
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def add(self, order: Order) -> Order:
        """Add a new order"""
        model = self._create_model_from_entity(order)
        self.session.add(model)
        self.session.flush()
        return order

    async def update(self, order: Order) -> Order:
        """Update an existing order"""
        existing = self.session.query(OrderModel).filter(OrderModel.id == order.id.value).first()
        if existing:
            self._update_model_from_entity(existing, order)
            self.session.flush()
        return order

    def _filtered(self, status: Optional[OrderStatus], search: Optional[str]):
        query = self.session.query(OrderModel)
        if status is not None:
            query = query.filter(OrderModel.status == status)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(or_(
                OrderModel.order_number.ilike(pattern),
                OrderModel.customer_email.ilike(pattern),
            ))
        return query

    async def list(
        self,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> List[Order]:
        """List orders, newest first"""
        models = (
            self._filtered(status, search)
            .options(selectinload(OrderModel.items), selectinload(OrderModel.notes))
            .order_by(OrderModel.created_at.desc(), OrderModel.order_number.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def count(self, status: Optional[OrderStatus] = None, search: Optional[str] = None) -> int:
        """Count orders matching the filters"""
        return self._filtered(status, search).count()

    async def count_created_in_year(self, year: int) -> int:
        return (
            self.session.query(OrderModel)
            .filter(extract('year', OrderModel.created_at) == year)
            .count()
        )

    def _create_model_from_entity(self, order: Order) -> OrderModel:
        """Create ORM model from domain entity"""
        model = OrderModel(
            id=order.id.value,
            order_number=order.order_number,
            user_id=order.user_id.value if order.user_id else None,
            customer_email=order.customer_email,
            currency=order.currency,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            tax_amount=order.tax_amount,
            discount_amount=order.discount_amount,
            total=order.total,
            created_at=order.created_at,
        )
        model.items = [
            OrderItemModel(
                product_id=item.product_id,
                variant_id=item.variant_id,
                product_name=item.product_name,
                variant_name=item.variant_name,
                sku=item.sku,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ]
        self._update_model_from_entity(model, order)
        return model

    def _update_model_from_entity(self, model: OrderModel, order: Order) -> None:
        """Update ORM model from domain entity.

        Items and charges are fixed at creation; notes are append only, so
        only entries beyond the stored ones are inserted.
        """
        model.status = order.status
        model.payment_intent_id = order.payment_intent_id
        model.payment_method = order.payment_method
        model.shipping_method = order.shipping_method
        model.tracking_number = order.tracking_number
        model.paid_at = order.paid_at
        model.shipped_at = order.shipped_at
        model.delivered_at = order.delivered_at
        model.cancelled_at = order.cancelled_at
        model.cancellation_reason = order.cancellation_reason
        model.updated_at = order.updated_at

        stored = len(model.notes)
        for note in order.notes[stored:]:
            model.notes.append(OrderNoteModel(
                created_at=note.created_at,
                author=note.author,
                text=note.text,
            ))

    def _map_to_entity(self, model: OrderModel) -> Order:
        """Map ORM model to domain entity"""
        return Order(
            id=OrderId(model.id),
            order_number=model.order_number,
            customer_email=model.customer_email,
            currency=model.currency,
            user_id=UserId(model.user_id) if model.user_id else None,
            status=OrderStatus(model.status),
            items=[
                OrderItem(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    variant_name=item.variant_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    unit_price=Decimal(item.unit_price),
                )
                for item in model.items
            ],
            subtotal=Decimal(model.subtotal),
            shipping_cost=Decimal(model.shipping_cost),
            tax_amount=Decimal(model.tax_amount),
            discount_amount=Decimal(model.discount_amount),
            total=Decimal(model.total),
            payment_intent_id=model.payment_intent_id,
            payment_method=model.payment_method,
            shipping_method=model.shipping_method,
            tracking_number=model.tracking_number,
            paid_at=_as_utc(model.paid_at),
            shipped_at=_as_utc(model.shipped_at),
            delivered_at=_as_utc(model.delivered_at),
            cancelled_at=_as_utc(model.cancelled_at),
            cancellation_reason=model.cancellation_reason,
            notes=[
                OrderNote(created_at=_as_utc(note.created_at), text=note.text, author=note.author)
                for note in model.notes
            ],
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )
