"""Admin: add order note use case"""

from typing import Optional

from ...domain.exceptions import InvalidArgumentError
from ...domain.services.order_lifecycle import OrderLifecycle
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.order_dtos import AddOrderNoteDTO, OrderResponseDTO
from .order_loading import load_order


class AddOrderNoteUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, lifecycle: OrderLifecycle):
        self.unit_of_work = unit_of_work
        self.lifecycle = lifecycle

    async def execute(self, order_id: str, request: AddOrderNoteDTO, author: Optional[str] = None) -> OrderResponseDTO:
        text = (request.note or "").strip()
        if not text:
            raise InvalidArgumentError("Note cannot be empty")

        async with self.unit_of_work:
            order = await load_order(self.unit_of_work, order_id)
            self.lifecycle.append_note(order, text, author=author or "admin")

            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        return OrderResponseDTO.from_entity(order)
