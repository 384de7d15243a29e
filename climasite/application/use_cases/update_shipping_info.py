"""Admin: update shipping info use case"""

from typing import Optional

from ...domain.services.order_lifecycle import OrderLifecycle
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.order_dtos import OrderResponseDTO, UpdateShippingInfoDTO
from ..event_log import log_order_events
from .order_loading import load_order


class UpdateShippingInfoUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, lifecycle: OrderLifecycle):
        self.unit_of_work = unit_of_work
        self.lifecycle = lifecycle

    async def execute(self, order_id: str, request: UpdateShippingInfoDTO, author: Optional[str] = None) -> OrderResponseDTO:
        async with self.unit_of_work:
            order = await load_order(self.unit_of_work, order_id)
            self.lifecycle.set_tracking_info(
                order,
                tracking_number=request.tracking_number,
                shipping_method=request.shipping_method,
                mark_shipped=request.mark_as_shipped,
                author=author or "admin",
            )

            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        log_order_events(order)
        return OrderResponseDTO.from_entity(order)
