"""Order repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.order import Order
from ..enums import OrderStatus
from ..value_objects.entity_ids import OrderId, UserId


class IOrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: OrderId, for_update: bool = False) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_payment_intent_id(self, payment_intent_id: str, for_update: bool = False) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UserId) -> List[Order]:
        pass

    @abstractmethod
    async def add(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def list(
        self,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> List[Order]:
        pass

    @abstractmethod
    async def count(self, status: Optional[OrderStatus] = None, search: Optional[str] = None) -> int:
        pass

    @abstractmethod
    async def count_created_in_year(self, year: int) -> int:
        pass
