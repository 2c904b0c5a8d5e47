from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import EMPLOYEE_ROLES, PermissionKey, Role
from modules.accounts.models import EmployeeProfile
from modules.accounts.repositories import PermissionDjangoStore
from modules.orders.constants import DeliveryType, OrderStatus, PaymentStatus
from modules.orders.models import Order, OrderItem
from modules.products.dtos import StockLine
from modules.products.ledger import StockLedger
from modules.products.models import Product, ProductVariation

SEED_PASSWORD = "seed-pass-123"


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        employees = self._seed_employees()
        customers = self._seed_customers()
        products = self._seed_products()
        orders_created = self._seed_orders(customers, products)
        self._seed_overrides(employees)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"employees={len(employees)}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_employees(self) -> dict:
        self.stdout.write("Creating employees...")
        User = get_user_model()
        employees = {}
        for role in EMPLOYEE_ROLES:
            username = role.value.lower()
            user, created = User.objects.get_or_create(
                username=username,
                defaults={"first_name": role.label, "is_staff": True},
            )
            if created:
                user.set_password(SEED_PASSWORD)
                user.save()
            EmployeeProfile.objects.get_or_create(user=user, defaults={"role": role})
            employees[role.value] = user
        self.stdout.write(self.style.SUCCESS("Creating employees... Done!"))
        return employees

    def _seed_customers(self) -> list:
        self.stdout.write("Creating customers...")
        User = get_user_model()
        customers = []
        for username, first_name in [
            ("ana", "Ana Souza"),
            ("bruno", "Bruno Lima"),
            ("carla", "Carla Mendes"),
        ]:
            user, created = User.objects.get_or_create(
                username=username, defaults={"first_name": first_name}
            )
            if created:
                user.set_password(SEED_PASSWORD)
                user.save()
            customers.append(user)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("TEE-001", "Basic T-shirt", Decimal("59.90"), ["S", "M", "L"]),
            ("HOOD-001", "Hoodie", Decimal("189.90"), ["M", "L"]),
            ("CAP-001", "Cap", Decimal("49.90"), []),
            ("MUG-001", "Mug", Decimal("34.90"), []),
            ("BAG-001", "Tote bag", Decimal("79.90"), ["Black", "Natural"]),
        ]
        for sku, name, price, variations in catalog:
            product, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "price": price,
                    "stock_quantity": random.randint(50, 200),
                },
            )
            if created:
                for variation_name in variations:
                    ProductVariation.objects.create(
                        product=product,
                        name=variation_name,
                        quantity=random.randint(10, 40),
                    )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, customers: list, products: list[Product]) -> int:
        """Two orders per status; stock is reserved for every order placed."""
        self.stdout.write("Creating orders...")
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        ledger = StockLedger()
        orders_created = 0
        for order_status in OrderStatus:
            for _ in range(2):
                order = Order.objects.create(
                    customer=random.choice(customers),
                    status=order_status,
                    delivery_type=random.choice(DeliveryType.values),
                    payment_status=(
                        PaymentStatus.PENDING
                        if order_status == OrderStatus.PENDING
                        else PaymentStatus.PAID
                    ),
                )
                lines = []
                total = Decimal("0.00")
                for product in random.sample(products, k=random.randint(1, 3)):
                    variation = product.variations.filter(is_active=True).first()
                    quantity = random.randint(1, 3)
                    item = OrderItem.objects.create(
                        order=order,
                        product=product,
                        variation=variation,
                        quantity=quantity,
                        price_at_purchase=product.price,
                    )
                    total += item.subtotal
                    lines.append(
                        StockLine(
                            product_id=product.pk,
                            variation_id=variation.pk if variation else None,
                            quantity=quantity,
                        )
                    )

                # Cancelled orders already had their stock restored.
                if order_status != OrderStatus.CANCELLED:
                    ledger.reserve(lines, strict=False)

                Order.objects.filter(pk=order.pk).update(
                    total_amount=total,
                    created_at=timezone.now() - timedelta(days=random.randint(0, 30)),
                )
                orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created

    def _seed_overrides(self, employees: dict) -> None:
        # Sample override: inventory staff may also see delivered-to-customer orders.
        inventory = employees[Role.INVENTORY_MANAGER.value]
        PermissionDjangoStore().set_override(
            inventory.pk, PermissionKey.ORDERS_DELIVERY.value, True
        )
