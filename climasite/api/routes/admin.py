"""Admin order management routes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...application.use_cases.add_order_note import AddOrderNoteUseCase
from ...application.use_cases.get_orders import GetOrderUseCase, ListOrdersUseCase
from ...application.use_cases.update_order_status import UpdateOrderStatusUseCase
from ...application.use_cases.update_shipping_info import UpdateShippingInfoUseCase
from ...application.dtos.order_dtos import (
    AddOrderNoteDTO,
    OrderListResponseDTO,
    OrderResponseDTO,
    UpdateOrderStatusDTO,
    UpdateShippingInfoDTO,
)
from ...api.dependencies import get_current_admin_user, get_unit_of_work, get_order_lifecycle
from ...api.errors import to_http_exception
from ...domain.entities.user import CurrentUser
from ...domain.exceptions import OrderDomainError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.order_lifecycle import OrderLifecycle


router = APIRouter()


@router.get("/orders", response_model=OrderListResponseDTO)
async def list_orders(
    page: int = Query(1),
    page_size: int = Query(20),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    admin_user: CurrentUser = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """List orders, newest first"""
    try:
        return await ListOrdersUseCase(unit_of_work).execute(page, page_size, status, search)
    except OrderDomainError as e:
        raise to_http_exception(e)


@router.get("/orders/{order_id}", response_model=OrderResponseDTO)
async def get_order(
    order_id: str,
    admin_user: CurrentUser = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    try:
        return await GetOrderUseCase(unit_of_work).by_id(order_id)
    except OrderDomainError as e:
        raise to_http_exception(e)


@router.put("/orders/{order_id}/status", response_model=OrderResponseDTO)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusDTO,
    admin_user: CurrentUser = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Move an order to another status"""
    use_case = UpdateOrderStatusUseCase(unit_of_work, lifecycle)
    try:
        return await use_case.execute(order_id, request, author=admin_user.subject)
    except OrderDomainError as e:
        raise to_http_exception(e)


@router.put("/orders/{order_id}/shipping", response_model=OrderResponseDTO)
async def update_shipping_info(
    order_id: str,
    request: UpdateShippingInfoDTO,
    admin_user: CurrentUser = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Set tracking number / shipping method, optionally marking the order shipped"""
    use_case = UpdateShippingInfoUseCase(unit_of_work, lifecycle)
    try:
        return await use_case.execute(order_id, request, author=admin_user.subject)
    except OrderDomainError as e:
        raise to_http_exception(e)


@router.post("/orders/{order_id}/notes", response_model=OrderResponseDTO)
async def add_order_note(
    order_id: str,
    request: AddOrderNoteDTO,
    admin_user: CurrentUser = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    use_case = AddOrderNoteUseCase(unit_of_work, lifecycle)
    try:
        return await use_case.execute(order_id, request, author=admin_user.subject)
    except OrderDomainError as e:
        raise to_http_exception(e)
