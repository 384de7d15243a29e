"""Shared order lookup for the direct (admin and customer) paths"""

from typing import Union

from ...domain.entities.order import Order
from ...domain.exceptions import OrderNotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrderId


async def load_order(unit_of_work: IUnitOfWork, order_id: Union[str, OrderId], for_update: bool = True) -> Order:
    """Load an order or raise ``OrderNotFoundError``.

    Unlike the webhook path, a missing order is an error the caller shows
    to the operator.
    """
    if not isinstance(order_id, OrderId):
        order_id = OrderId.from_str(order_id)

    order = await unit_of_work.orders.get_by_id(order_id, for_update=for_update)
    if not order:
        raise OrderNotFoundError(str(order_id))
    return order
