"""Customer order routes"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...application.use_cases.create_order import CreateOrderUseCase
from ...application.use_cases.cancel_order import CancelOrderUseCase
from ...application.use_cases.get_orders import GetOrderUseCase, ListUserOrdersUseCase
from ...application.dtos.order_dtos import CancelOrderDTO, OrderCreateDTO, OrderResponseDTO
from ...api.dependencies import get_current_user, get_unit_of_work, get_order_lifecycle
from ...api.errors import to_http_exception
from ...domain.entities.user import CurrentUser
from ...domain.exceptions import OrderDomainError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.order_lifecycle import OrderLifecycle


router = APIRouter(tags=["orders"])


@router.post("/", response_model=OrderResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreateDTO,
    current_user: CurrentUser = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Create a new order"""
    use_case = CreateOrderUseCase(unit_of_work, lifecycle)
    try:
        return await use_case.execute(order_data, current_user.user_id)
    except OrderDomainError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[OrderResponseDTO])
async def get_my_orders(
    current_user: CurrentUser = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Get the current user's orders"""
    return await ListUserOrdersUseCase(unit_of_work).execute(current_user.user_id)


@router.get("/{order_number}", response_model=OrderResponseDTO)
async def get_order(
    order_number: str,
    current_user: CurrentUser = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Get order by order number"""
    try:
        order = await GetOrderUseCase(unit_of_work).by_number(order_number)
    except OrderDomainError as e:
        raise to_http_exception(e)

    # Check if user owns this order
    owner = current_user.user_id
    if not current_user.is_admin and (owner is None or order.user_id != owner.value):
        raise HTTPException(status_code=403, detail="Not authorized to access this order")
    return order


@router.post("/{order_id}/cancel", response_model=OrderResponseDTO)
async def cancel_order(
    order_id: str,
    request: CancelOrderDTO,
    current_user: CurrentUser = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Cancel an order that has not been processed yet"""
    use_case = CancelOrderUseCase(unit_of_work, lifecycle)
    try:
        return await use_case.execute(
            order_id,
            request,
            current_user.user_id,
            is_admin=current_user.is_admin,
            author=current_user.subject,
        )
    except OrderDomainError as e:
        raise to_http_exception(e)
