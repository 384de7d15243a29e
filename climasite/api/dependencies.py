"""API dependencies"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.security import decode_token
from ..db.database import get_db
from ..domain.clock import Clock, SystemClock
from ..domain.entities.user import CurrentUser
from ..domain.enums import UserRole
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.services.order_lifecycle import OrderLifecycle
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from ..infrastructure.external_services.payment_service import PaymentService


security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """Get current authenticated user from the bearer token"""
    payload = decode_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    try:
        role = UserRole(payload.get("role", UserRole.USER.value))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    return CurrentUser(subject=payload["sub"], role=role)


async def get_current_admin_user(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Get current admin user"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def get_unit_of_work(db: Session = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


def get_clock() -> Clock:
    return SystemClock()


def get_order_lifecycle(clock: Clock = Depends(get_clock)) -> OrderLifecycle:
    """Get order lifecycle service"""
    return OrderLifecycle(clock)


def get_payment_service() -> PaymentService:
    """Get payment service"""
    return PaymentService()
