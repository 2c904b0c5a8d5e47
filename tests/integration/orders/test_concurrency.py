"""Two writers racing on the same order.

The deterministic variant replays the loser's stale read; the threaded
variant needs real row locking and is skipped on SQLite.
"""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest
from django.db import connection

from modules.accounts.constants import Role
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import ConcurrentModification, InvalidTransition
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.integration


def test_conditional_write_succeeds_once(make_order):
    order = make_order()
    repo = OrderDjangoRepository()

    assert repo.compare_and_set_status(order.pk, {"Pending"}, "Cancelled") is True
    assert repo.compare_and_set_status(order.pk, {"Pending"}, "Cancelled") is False


def test_cancel_race_restores_stock_once(
    make_order, product, make_employee, actor_for, order_service
):
    order = make_order(lines=[(product, None, 4)])
    first = actor_for(make_employee(Role.ADMIN))
    second = actor_for(make_employee(Role.TRANSACTION_MANAGER))

    stale = Order.objects.get(pk=order.pk)

    order_service.cancel(order.pk, first, expected_status=OrderStatus.PENDING)
    # The loser read the order before the winner committed.
    with patch.object(OrderDjangoRepository, "get_by_id", return_value=stale):
        with pytest.raises(ConcurrentModification):
            order_service.cancel(order.pk, second, expected_status=OrderStatus.PENDING)

    product.refresh_from_db()
    assert product.stock_quantity == 14


def test_proceed_racing_cancel(make_order, product, make_employee, actor_for, order_service):
    order = make_order(lines=[(product, None, 1)])
    admin = actor_for(make_employee(Role.ADMIN))

    order_service.proceed(order.pk, admin, expected_status=OrderStatus.PENDING)
    with pytest.raises(ConcurrentModification):
        order_service.cancel(order.pk, admin, expected_status=OrderStatus.PENDING)

    product.refresh_from_db()
    assert product.stock_quantity == 10


@pytest.mark.skipif(connection.vendor == "sqlite", reason="needs row-level locking")
@pytest.mark.django_db(transaction=True)
def test_threaded_cancels(make_order, product, make_employee, actor_for, order_service):
    order = make_order(lines=[(product, None, 3)])
    actors = [actor_for(make_employee(Role.ADMIN)) for _ in range(2)]
    barrier = threading.Barrier(len(actors))
    outcomes = []

    def cancel(actor):
        barrier.wait()
        try:
            order_service.cancel(order.pk, actor, expected_status=OrderStatus.PENDING)
            outcomes.append("ok")
        except (ConcurrentModification, InvalidTransition):
            outcomes.append("conflict")
        finally:
            connection.close()

    threads = [threading.Thread(target=cancel, args=(actor,)) for actor in actors]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["conflict", "ok"]
    product.refresh_from_db()
    assert product.stock_quantity == 13
