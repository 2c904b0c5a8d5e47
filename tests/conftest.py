import uuid
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from modules.accounts.dtos import Actor
from modules.accounts.models import EmployeeProfile
from modules.accounts.repositories import PermissionDjangoStore
from modules.accounts.services import PermissionGate
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.orders.views import default_order_service
from modules.products.models import Product, ProductVariation


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and actors
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user(django_user_model):
    def _make(username=None, **extra):
        return django_user_model.objects.create_user(
            username=username or f"user-{uuid.uuid4().hex[:8]}",
            password="test-pass-123",
            **extra,
        )

    return _make


@pytest.fixture()
def make_employee(make_user):
    def _make(role, username=None):
        user = make_user(username or f"{role.value.lower()}-{uuid.uuid4().hex[:6]}")
        EmployeeProfile.objects.create(user=user, role=role)
        return user

    return _make


@pytest.fixture()
def customer(make_user):
    return make_user("customer", first_name="Ana", last_name="Souza")


@pytest.fixture()
def actor_for():
    """Resolve the request-scoped actor of a user (role + capabilities)."""
    store = PermissionDjangoStore()
    gate = PermissionGate(store)

    def _resolve(user):
        return gate.bind(Actor(id=user.pk, role=store.role_of(user.pk)))

    return _resolve


@pytest.fixture()
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


# ---------------------------------------------------------------------------
# Catalogue and orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def product():
    return Product.objects.create(
        sku="TEE-001",
        name="Basic T-shirt",
        price=Decimal("50.00"),
        stock_quantity=10,
    )


@pytest.fixture()
def variation(product):
    return ProductVariation.objects.create(product=product, name="M", quantity=5)


@pytest.fixture()
def make_order(customer):
    def _make(status=OrderStatus.PENDING, lines=(), owner=None, pk=None):
        order = Order.objects.create(pk=pk, customer=owner or customer, status=status)
        total = Decimal("0.00")
        for line_product, line_variation, quantity in lines:
            item = OrderItem.objects.create(
                order=order,
                product=line_product,
                variation=line_variation,
                quantity=quantity,
                price_at_purchase=line_product.price,
            )
            total += item.subtotal
        Order.objects.filter(pk=order.pk).update(total_amount=total)
        order.refresh_from_db()
        return order

    return _make


@pytest.fixture()
def order_service():
    return default_order_service()
