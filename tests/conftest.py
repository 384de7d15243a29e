import os

os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

import climasite.infrastructure.orm  # noqa: F401
from climasite.api.dependencies import get_clock, get_payment_service
from climasite.core.security import create_access_token
from climasite.db.database import SessionLocal, engine
from climasite.db.models import Base
from climasite.domain.clock import FixedClock
from climasite.domain.entities.order import Order, OrderItem
from climasite.domain.enums import OrderStatus
from climasite.domain.services.order_lifecycle import OrderLifecycle
from climasite.domain.value_objects.entity_ids import OrderId, UserId
from climasite.infrastructure.external_services.payment_service import PaymentService
from climasite.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl


WEBHOOK_SECRET = "whsec_test_secret"
NOW = datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)

# Shortest legal path from Pending to each status
PATH_TO_STATUS = {
    OrderStatus.PENDING: [],
    OrderStatus.PAID: [OrderStatus.PAID],
    OrderStatus.PAYMENT_FAILED: [OrderStatus.PAYMENT_FAILED],
    OrderStatus.PROCESSING: [OrderStatus.PAID, OrderStatus.PROCESSING],
    OrderStatus.SHIPPED: [OrderStatus.PAID, OrderStatus.PROCESSING, OrderStatus.SHIPPED],
    OrderStatus.DELIVERED: [
        OrderStatus.PAID, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED,
    ],
    OrderStatus.CANCELLED: [OrderStatus.CANCELLED],
    OrderStatus.REFUNDED: [OrderStatus.PAID, OrderStatus.REFUNDED],
}


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def lifecycle(clock):
    return OrderLifecycle(clock)


@pytest.fixture
def make_order(lifecycle):
    """Build an in-memory order already moved to ``status``"""
    counter = {"n": 0}

    def _make(
        status: OrderStatus = OrderStatus.PENDING,
        payment_intent_id: str = "pi_test_123",
        user_id: UserId = None,
        currency: str = "USD",
    ) -> Order:
        counter["n"] += 1
        order = Order(
            id=OrderId.generate(),
            order_number=f"ORD-2026-{counter['n']:06d}",
            customer_email="User@Test.com",
            currency=currency,
            user_id=user_id,
            created_at=NOW,
            updated_at=NOW,
        )
        order.add_item(OrderItem(
            product_id=uuid4(),
            variant_id=uuid4(),
            product_name="Split AC 12000 BTU",
            variant_name="White",
            sku="AC-12K-WH",
            quantity=2,
            unit_price=Decimal("499.00"),
        ))
        order.set_charges(shipping_cost=Decimal("25.00"), tax_amount=Decimal("80.00"))
        if payment_intent_id:
            order.set_payment_info(payment_intent_id, "card")
        for step in PATH_TO_STATUS[status]:
            lifecycle.transition(order, step, "setup")
        order.get_events()
        return order

    return _make


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def unit_of_work(db_session):
    return UnitOfWorkImpl(db_session)


@pytest.fixture
def save_order(db_session):
    """Persist an order built by ``make_order``"""

    async def _save(order: Order) -> Order:
        uow = UnitOfWorkImpl(db_session)
        async with uow:
            await uow.orders.add(order)
            await uow.commit()
        return order

    return _save


@pytest.fixture
def client(db_session, clock):
    from climasite.main import app

    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(webhook_secret=WEBHOOK_SECRET)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token("admin@climasite.test", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_id():
    return UserId.generate()


@pytest.fixture
def customer_headers(customer_id):
    token = create_access_token(str(customer_id.value), role="user")
    return {"Authorization": f"Bearer {token}"}
