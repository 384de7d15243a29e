"""Create Order Use Case"""

from typing import Optional

from ...domain.entities.order import Order, OrderItem
from ...domain.events.order_events import OrderPlaced
from ...domain.services.order_lifecycle import OrderLifecycle
from ...domain.value_objects.entity_ids import OrderId, UserId
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...core.config import settings
from ..dtos.order_dtos import OrderCreateDTO, OrderResponseDTO
from ..event_log import log_order_events


class CreateOrderUseCase:
    """Use case for placing a new Pending order at checkout"""

    def __init__(self, unit_of_work: IUnitOfWork, lifecycle: OrderLifecycle):
        self.unit_of_work = unit_of_work
        self.lifecycle = lifecycle

    async def execute(self, order_data: OrderCreateDTO, user_id: Optional[UserId] = None) -> OrderResponseDTO:
        """Execute the create order use case"""
        async with self.unit_of_work:
            now = self.lifecycle.clock.now()
            order_number = await self._next_order_number(now.year)

            order = Order(
                id=OrderId.generate(),
                order_number=order_number,
                customer_email=order_data.customer_email,
                currency=order_data.currency or settings.DEFAULT_CURRENCY,
                user_id=user_id,
                shipping_method=order_data.shipping_method,
                created_at=now,
                updated_at=now,
            )
            for item in order_data.items:
                order.add_item(OrderItem(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    variant_name=item.variant_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                ))
            order.set_charges(
                shipping_cost=order_data.shipping_cost,
                tax_amount=order_data.tax_amount,
                discount_amount=order_data.discount_amount,
            )
            if order_data.payment_intent_id:
                order.set_payment_info(order_data.payment_intent_id, order_data.payment_method)

            self.lifecycle.append_note(order, "Order placed")
            order.record_event(OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                customer_email=order.customer_email,
                occurred_at=now,
            ))

            await self.unit_of_work.orders.add(order)
            await self.unit_of_work.commit()

            log_order_events(order)
            return OrderResponseDTO.from_entity(order)

    async def _next_order_number(self, year: int) -> str:
        count = await self.unit_of_work.orders.count_created_in_year(year)
        return f"ORD-{year}-{count + 1:06d}"
