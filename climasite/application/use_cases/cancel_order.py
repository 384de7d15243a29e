"""Customer: cancel order use case"""

from typing import Optional

from ...domain.enums import OrderStatus
from ...domain.exceptions import InvalidTransitionError, OrderAccessDeniedError
from ...domain.services.order_lifecycle import OrderLifecycle
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ..dtos.order_dtos import CancelOrderDTO, OrderResponseDTO
from ..event_log import log_order_events
from .order_loading import load_order


class CancelOrderUseCase:
    """Customers may cancel their own orders while Pending or Paid"""

    def __init__(self, unit_of_work: IUnitOfWork, lifecycle: OrderLifecycle):
        self.unit_of_work = unit_of_work
        self.lifecycle = lifecycle

    async def execute(
        self,
        order_id: str,
        request: CancelOrderDTO,
        user_id: Optional[UserId],
        is_admin: bool = False,
        author: Optional[str] = None,
    ) -> OrderResponseDTO:
        async with self.unit_of_work:
            order = await load_order(self.unit_of_work, order_id)

            if not is_admin and (user_id is None or order.user_id != user_id):
                raise OrderAccessDeniedError("Access denied")

            if not order.can_be_cancelled:
                raise InvalidTransitionError(order.status, OrderStatus.CANCELLED)

            reason = (request.cancellation_reason or "").strip() or None
            self.lifecycle.transition(
                order,
                OrderStatus.CANCELLED,
                reason=reason,
                author=author or "customer",
            )
            order.cancellation_reason = reason

            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        log_order_events(order)
        return OrderResponseDTO.from_entity(order)
