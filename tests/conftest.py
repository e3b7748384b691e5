# tests/conftest.py - shared fixtures for the equipment registry tests

from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from core.constants import InkType, UserRole
from core.dto import LineItemDTO, ReceiptDTO

PASSWORD = "s3cret-Passw0rd"


# --- Relax settings so tests are fast and isolated ---------------------------
@pytest.fixture(autouse=True)
def _test_settings(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.EQUIPTRACK = {"STEP_UP_GRANT_TTL": 300, "DEFAULT_UNIT": "piece"}


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


# --- Users -------------------------------------------------------------------
@pytest.fixture
def make_user(django_user_model):
    def _make(username, role=UserRole.TECHNICIAN, full_name="", **extra):
        return django_user_model.objects.create_user(
            username=username,
            password=PASSWORD,
            email=f"{username}@example.com",
            role=role,
            full_name=full_name,
            **extra
        )
    return _make


@pytest.fixture
def technician(make_user):
    return make_user("somchai", full_name="Somchai K.")


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", role=UserRole.ADMIN, full_name="Registry Admin")


@pytest.fixture
def viewer(make_user):
    return make_user("viewer", role=UserRole.USER)


# --- Catalogue ---------------------------------------------------------------
@pytest.fixture
def supplier():
    from inventory.models import InkSupplier
    return InkSupplier.objects.create(name="Office Supply Co.")


@pytest.fixture
def product():
    from inventory.models import InkProduct
    return InkProduct.objects.create(brand="HP", model_code="680", ink_type=InkType.INK)


@pytest.fixture
def toner():
    from inventory.models import InkProduct
    return InkProduct.objects.create(brand="Brother", model_code="TN-2480", ink_type=InkType.TONER)


@pytest.fixture
def receipt_data(supplier, product):
    """Receipt of 5 x product P"""
    def _data(quantity=5, document_no="RC-0001", unit_price=Decimal("350.00")):
        return ReceiptDTO(
            document_no=document_no,
            supplier_id=supplier.pk,
            received_at=date(2024, 3, 1),
            items=[LineItemDTO(product_id=product.pk, quantity=quantity, unit_price=unit_price)],
        )
    return _data


# --- API clients -------------------------------------------------------------
@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def tech_client(technician):
    client = APIClient()
    client.force_authenticate(user=technician)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
