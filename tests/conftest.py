"""Shared test fixtures for the billing engine test suite."""

import pytest

from medbill.domain.models.invoice import CatalogProduct, LineItem
from medbill.domain.services.line_items import recompute


@pytest.fixture
def paracetamol() -> CatalogProduct:
    """18% GST product whose tax-inclusive list price is a round 118."""
    return CatalogProduct(
        product_id="P-001",
        name="Paracetamol 500mg (10 tabs)",
        list_price=118.0,
        tax_rate_percent=18,
        current_stock=100,
        hsn_code="30049099",
        batch_no="PCM2501",
    )


@pytest.fixture
def amoxicillin() -> CatalogProduct:
    """12% GST product with little stock left."""
    return CatalogProduct(
        product_id="P-002",
        name="Amoxicillin 250mg (10 caps)",
        list_price=224.0,
        tax_rate_percent=12,
        current_stock=5,
        hsn_code="30041010",
        batch_no="AMX2407",
    )


@pytest.fixture
def simple_line() -> LineItem:
    """qty 10 @ 100, 18% GST, no discount → total 1180."""
    return recompute(LineItem(quantity_sold=10, base_rate=100, tax_rate_percent=18))


@pytest.fixture
def discounted_line() -> LineItem:
    """qty 5 @ 200, 12% GST, 10% scheme discount → total 1008."""
    return recompute(LineItem(
        quantity_sold=5,
        base_rate=200,
        tax_rate_percent=12,
        scheme_discount_percent=10,
    ))
