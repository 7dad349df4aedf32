"""Shared test fixtures for the pricing engine test suite."""

from decimal import Decimal

import pytest

from procure_pricing.domain.models.pricing import Charge, LineItem


@pytest.fixture
def basic_item() -> LineItem:
    """100 x 2 at 10% discount, 18% GST (Scenario A from the pricing screen)."""
    return LineItem(
        indent_number="IND-001",
        item_code="X",
        rate=Decimal("100"),
        qty=Decimal("2"),
        discount_type="percent",
        discount_percent=Decimal("10"),
        tax_rate=Decimal("18"),
        attributes={"itemDescription": "Ball bearing 6204", "unit": "NOS"},
    )


@pytest.fixture
def low_rate_item() -> LineItem:
    """50 x 4, no discount, 5% GST."""
    return LineItem(
        indent_number="IND-002",
        item_code="Y",
        rate=Decimal("50"),
        qty=Decimal("4"),
        discount_type="percent",
        tax_rate=Decimal("5"),
    )


@pytest.fixture
def igst_charge() -> Charge:
    return Charge(
        charge_name="igst @18%",
        nature="percent",
        charge_value=Decimal("18"),
        tax_field="igst",
    )


@pytest.fixture
def split_rows() -> list[LineItem]:
    """The same item X requisitioned on two indents, plus an unrelated item Y."""
    return [
        LineItem(indent_number="IND-A", item_code="X", rate=Decimal("100"), qty=Decimal("3"),
                 discount_type="percent", tax_rate=Decimal("18")),
        LineItem(indent_number="IND-B", item_code="X", rate=Decimal("120"), qty=Decimal("5"),
                 discount_type="percent", tax_rate=Decimal("12")),
        LineItem(indent_number="IND-A", item_code="Y", rate=Decimal("40"), qty=Decimal("1"),
                 discount_type="amount", discount_amount=Decimal("4"), tax_rate=Decimal("5")),
    ]
