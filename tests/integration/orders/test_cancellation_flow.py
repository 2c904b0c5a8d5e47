"""Cancellation end to end against the database.

Scenario: order #100 (Pending) with
- product 5, no variation, qty 3, stock 10;
- product 9 / variation 7, qty 2, variation stock 5, product stock 20.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.accounts.constants import Role
from modules.audit.models import ActivityLog
from modules.audit.repositories import ActivityLogDjangoSink
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import ConcurrentModification, InvalidTransition, OperationFailed
from modules.orders.models import Order
from modules.products.ledger import StockLedger
from modules.products.models import Product, ProductVariation

pytestmark = pytest.mark.integration


@pytest.fixture()
def scenario(make_order):
    product_5 = Product.objects.create(
        pk=5, sku="P-5", name="Product 5", price=Decimal("10.00"), stock_quantity=10
    )
    product_9 = Product.objects.create(
        pk=9, sku="P-9", name="Product 9", price=Decimal("25.00"), stock_quantity=20
    )
    variation_7 = ProductVariation.objects.create(
        pk=7, product=product_9, name="Large", quantity=5
    )
    order = make_order(
        pk=100,
        status=OrderStatus.PENDING,
        lines=[(product_5, None, 3), (product_9, variation_7, 2)],
    )
    return order, product_5, product_9, variation_7


@pytest.fixture()
def admin(make_employee, actor_for):
    return actor_for(make_employee(Role.ADMIN))


def _counters(product_5, product_9, variation_7):
    for row in (product_5, product_9, variation_7):
        row.refresh_from_db()
    return product_5.stock_quantity, product_9.stock_quantity, variation_7.quantity


class TestCancelScenario:
    def test_restores_stock_and_records_one_entry(self, scenario, admin, order_service):
        order, product_5, product_9, variation_7 = scenario

        result = order_service.cancel(100, admin)

        assert _counters(product_5, product_9, variation_7) == (13, 22, 7)
        order.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
        assert result.old_status == OrderStatus.PENDING

        entries = ActivityLog.objects.filter(record_id="100", action="CANCEL")
        assert entries.count() == 1
        assert entries.get().actor_id == admin.id

    @pytest.mark.parametrize(
        "status", [OrderStatus.PROCESSING, OrderStatus.SHIPPING, OrderStatus.DELIVERY]
    )
    def test_every_cancellable_status(self, scenario, admin, order_service, status):
        order, product_5, product_9, variation_7 = scenario
        Order.objects.filter(pk=100).update(status=status)

        order_service.cancel(100, admin)

        assert _counters(product_5, product_9, variation_7) == (13, 22, 7)

    def test_second_cancel_restores_nothing(self, scenario, admin, order_service):
        order, product_5, product_9, variation_7 = scenario
        order_service.cancel(100, admin)

        with pytest.raises(InvalidTransition):
            order_service.cancel(100, admin)

        assert _counters(product_5, product_9, variation_7) == (13, 22, 7)
        assert ActivityLog.objects.filter(record_id="100").count() == 1

    def test_cancelled_order_rejected_from_its_old_screen(self, scenario, admin, order_service):
        order, product_5, product_9, variation_7 = scenario
        order_service.cancel(100, admin, expected_status=OrderStatus.PENDING)

        with pytest.raises(InvalidTransition):
            order_service.cancel(100, admin, expected_status=OrderStatus.PENDING)

        assert _counters(product_5, product_9, variation_7) == (13, 22, 7)

    def test_completed_order_rejected_from_pending_screen(
        self, scenario, admin, order_service
    ):
        order, product_5, product_9, variation_7 = scenario
        Order.objects.filter(pk=100).update(status=OrderStatus.COMPLETED)

        with pytest.raises(InvalidTransition):
            order_service.cancel(100, admin, expected_status=OrderStatus.PENDING)

        assert Order.objects.get(pk=100).status == OrderStatus.COMPLETED
        assert _counters(product_5, product_9, variation_7) == (10, 20, 5)

    def test_order_moved_on_from_screen_conflicts(self, scenario, admin, order_service):
        order, product_5, product_9, variation_7 = scenario
        order_service.proceed(100, admin, expected_status=OrderStatus.PENDING)

        with pytest.raises(ConcurrentModification):
            order_service.cancel(100, admin, expected_status=OrderStatus.PENDING)

        assert Order.objects.get(pk=100).status == OrderStatus.PROCESSING
        assert _counters(product_5, product_9, variation_7) == (10, 20, 5)


class TestCancelAtomicity:
    def test_failed_release_leaves_order_untouched(self, scenario, admin, order_service):
        order, product_5, product_9, variation_7 = scenario

        with patch.object(StockLedger, "adjust", side_effect=[None, DatabaseError("lost")]):
            with pytest.raises(OperationFailed):
                order_service.cancel(100, admin)

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert _counters(product_5, product_9, variation_7) == (10, 20, 5)
        assert not ActivityLog.objects.exists()

    def test_audit_failure_does_not_fail_cancel(self, scenario, admin, order_service):
        order, product_5, product_9, variation_7 = scenario

        with patch.object(
            ActivityLogDjangoSink, "write", side_effect=DatabaseError("audit table locked")
        ):
            result = order_service.cancel(100, admin)

        assert result.new_status == OrderStatus.CANCELLED
        order.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
        assert _counters(product_5, product_9, variation_7) == (13, 22, 7)
