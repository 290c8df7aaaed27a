from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.categories.dtos import CreateCategoryDTO
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.customers.dtos import CreateCustomerDTO
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, UpdateOrderDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.dtos import CreateProductDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

SEED_CATEGORIES = [
    ("Periféricos", "Mouses, teclados e headsets"),
    ("Monitores", "Monitores e suportes"),
    ("Armazenamento", "SSDs, HDs e pendrives"),
]

SEED_PRODUCTS = [
    ("Mouse sem fio", Decimal("79.90"), 120, "Periféricos"),
    ("Teclado mecânico", Decimal("349.00"), 60, "Periféricos"),
    ("Headset USB", Decimal("199.90"), 45, "Periféricos"),
    ("Monitor 24 polegadas", Decimal("899.00"), 25, "Monitores"),
    ("Suporte articulado", Decimal("159.00"), 40, "Monitores"),
    ("SSD 1TB", Decimal("429.90"), 80, "Armazenamento"),
    ("Pendrive 64GB", Decimal("39.90"), 200, "Armazenamento"),
]

SEED_CUSTOMERS = [
    ("Ana Souza", "ana@example.com", "59860184275"),
    ("Bruno Lima", "bruno@example.com", "39053344705"),
    ("Carla Mendes", "carla@example.com", "11144477735"),
    ("Daniel Costa", "daniel@example.com", "12345678909"),
    ("Eduarda Alves", "eduarda@example.com", "98765432100"),
    ("Fernando Rocha", "fernando@example.com", "52998224725"),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders", type=int, default=15, help="Number of orders to create."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        order_repo = OrderDjangoRepository()
        category_repo = CategoryDjangoRepository()
        product_repo = ProductDjangoRepository()
        customer_repo = CustomerDjangoRepository()

        self._categories = CategoryService(category_repo, product_repo)
        self._products = ProductService(product_repo, category_repo, order_repo)
        self._customers = CustomerService(customer_repo, order_repo)
        self._orders = OrderService(order_repo, customer_repo, product_repo)

        users_created = self._seed_users()
        categories = self._seed_categories(category_repo)
        products = self._seed_products(product_repo, categories)
        customers = self._seed_customers(customer_repo)
        orders_created = self._seed_orders(customers, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"categories={len(categories)}, "
                f"products={len(products)}, "
                f"customers={len(customers)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            return 0
        User.objects.create_superuser("admin", password="admin123")
        return 1

    def _seed_categories(self, repo) -> dict:
        self.stdout.write("Creating categories...")
        categories = {}
        for name, description in SEED_CATEGORIES:
            category = repo.get_by_name(name) or self._categories.create_category(
                CreateCategoryDTO(name=name, description=description)
            )
            categories[name] = category
        return categories

    def _seed_products(self, repo, categories: dict) -> list:
        self.stdout.write("Creating products...")
        products = []
        for name, price, stock, category_name in SEED_PRODUCTS:
            product = repo.get_by_name(name) or self._products.create_product(
                CreateProductDTO(
                    name=name,
                    price=price,
                    stock=stock,
                    category_id=categories[category_name].id,
                )
            )
            products.append(product)
        return products

    def _seed_customers(self, repo) -> list:
        self.stdout.write("Creating customers...")
        customers = []
        for name, email, cpf in SEED_CUSTOMERS:
            customer = repo.get_by_cpf(cpf) or self._customers.create_customer(
                CreateCustomerDTO(name=name, email=email, cpf=cpf, password="senha123")
            )
            customers.append(customer)
        return customers

    def _seed_orders(self, customers: list, products: list, count: int) -> int:
        self.stdout.write("Creating orders...")
        statuses = [choice for choice, _ in OrderStatus.choices]
        now = timezone.now()
        for _ in range(count):
            chosen = random.sample(products, k=random.randint(1, 3))
            order = self._orders.create_order(
                CreateOrderDTO(
                    customer_id=random.choice(customers).id,
                    order_date=now - timedelta(days=random.randint(0, 60)),
                    items=[
                        CreateOrderItemDTO(
                            product_id=product.id, quantity=random.randint(1, 3)
                        )
                        for product in chosen
                    ],
                )
            )
            status = random.choice(statuses)
            if status != OrderStatus.PENDING:
                self._orders.update_order(order.id, UpdateOrderDTO(status=status))
        return count
