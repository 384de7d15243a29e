"""Order queries"""

import math
from typing import List, Optional

from ...core.config import settings
from ...domain.exceptions import InvalidArgumentError, OrderNotFoundError
from ...domain.services.order_lifecycle import parse_status
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ..dtos.order_dtos import OrderListResponseDTO, OrderResponseDTO
from .order_loading import load_order


class GetOrderUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def by_id(self, order_id: str) -> OrderResponseDTO:
        async with self.unit_of_work:
            order = await load_order(self.unit_of_work, order_id, for_update=False)
        return OrderResponseDTO.from_entity(order)

    async def by_number(self, order_number: str) -> OrderResponseDTO:
        async with self.unit_of_work:
            order = await self.unit_of_work.orders.get_by_order_number(order_number)
        if not order:
            raise OrderNotFoundError(order_number)
        return OrderResponseDTO.from_entity(order)


class ListUserOrdersUseCase:
    """Orders placed by one customer, newest first"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: Optional[UserId]) -> List[OrderResponseDTO]:
        if user_id is None:
            return []
        async with self.unit_of_work:
            orders = await self.unit_of_work.orders.get_by_user_id(user_id)
        return [OrderResponseDTO.from_entity(order) for order in orders]


class ListOrdersUseCase:
    """Admin order listing with status filter, search and pagination"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> OrderListResponseDTO:
        if page < 1:
            raise InvalidArgumentError("Page must be at least 1")
        if page_size < 1 or page_size > settings.ORDERS_MAX_PAGE_SIZE:
            raise InvalidArgumentError(f"Page size must be between 1 and {settings.ORDERS_MAX_PAGE_SIZE}")
        status_filter = parse_status(status) if status else None

        async with self.unit_of_work:
            total_count = await self.unit_of_work.orders.count(status=status_filter, search=search)
            orders = await self.unit_of_work.orders.list(
                status=status_filter,
                search=search,
                offset=(page - 1) * page_size,
                limit=page_size,
            )

        return OrderListResponseDTO(
            items=[OrderResponseDTO.from_entity(order) for order in orders],
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total_count / page_size) if total_count else 0,
        )
