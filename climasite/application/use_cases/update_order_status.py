"""Admin: update order status use case"""

from typing import Optional

from ...domain.services.order_lifecycle import OrderLifecycle, parse_status
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.order_dtos import OrderResponseDTO, UpdateOrderStatusDTO
from ..event_log import log_order_events
from .order_loading import load_order


class UpdateOrderStatusUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, lifecycle: OrderLifecycle):
        self.unit_of_work = unit_of_work
        self.lifecycle = lifecycle

    async def execute(self, order_id: str, request: UpdateOrderStatusDTO, author: Optional[str] = None) -> OrderResponseDTO:
        """Move the order to the requested status.

        Raises ``InvalidArgumentError`` for an unknown status name,
        ``OrderNotFoundError`` and ``InvalidTransitionError``.
        """
        target = parse_status(request.status)

        async with self.unit_of_work:
            order = await load_order(self.unit_of_work, order_id)
            self.lifecycle.transition(order, target, reason=request.note, author=author or "admin")

            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        log_order_events(order)
        return OrderResponseDTO.from_entity(order)
