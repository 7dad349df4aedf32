"""Tests for document edits: re-pricing a row, adding charges, aligning tax lines."""

from dataclasses import replace
from decimal import Decimal

import pytest

from procure_pricing.domain.models.pricing import Charge, PricedDocument, QtyMapEntry, indent_key
from procure_pricing.domain.services.document_aggregator import price_document
from procure_pricing.domain.services.document_editing import (
    align_item_charges,
    apply_charge,
    reprice_document_item,
)
from procure_pricing.domain.services.line_item_pricer import price_item


@pytest.fixture
def document(basic_item, low_rate_item) -> PricedDocument:
    return price_document(PricedDocument(items=[price_item(basic_item), price_item(low_rate_item)]))


def test_indent_key_joins_indent_and_item_code(basic_item):
    assert indent_key(basic_item) == "IND-001:X"
    assert indent_key(QtyMapEntry("IND-9", "Q", Decimal("1"))) == "IND-9:Q"


class TestRepriceDocumentItem:

    def test_only_matching_row_changes(self, document, basic_item):
        updated = reprice_document_item(document, replace(basic_item, qty=Decimal("3")))

        assert updated.items[0].amount.basic == Decimal("300")
        assert updated.items[0].amount.total == Decimal("318.6")
        assert updated.items[1] is document.items[1]
        assert updated.amount.total == Decimal("528.6")
        # original document untouched
        assert document.amount.total == Decimal("422.4")

    def test_unknown_row_leaves_totals(self, document, basic_item):
        updated = reprice_document_item(document, replace(basic_item, indent_number="IND-404"))
        assert updated.items == document.items
        assert updated.amount == document.amount


class TestApplyCharge:

    def test_item_charge_is_added_to_every_row(self, document):
        freight = Charge(charge_name="freight", nature="amount", charge_value=10, charge_on="item")
        updated = apply_charge(document, freight)

        for item in updated.items:
            assert item.tax_details[-1].charge_name == "freight"
            assert item.tax_details[-1].charge_amount == Decimal("10")
        assert updated.items[0].amount.total == Decimal("222.4")
        assert updated.tax_details == []
        assert updated.amount.total == Decimal("442.4")

    def test_base_charge_goes_to_document(self, document):
        tcs = Charge(charge_name="tcs", nature="percent", charge_value=1, charge_on="base")
        updated = apply_charge(document, tcs)

        assert [c.charge_name for c in updated.tax_details] == ["tcs"]
        assert updated.tax_details[0].charge_amount == Decimal("3.8")
        assert all(i.tax_details[-1].charge_name != "tcs" for i in updated.items)
        assert updated.amount.total == Decimal("426.2")


class TestAlignItemCharges:

    def test_rows_get_the_union_of_charges(self, basic_item, low_rate_item, igst_charge):
        first = price_item(basic_item)
        second = price_item(replace(low_rate_item, tax_details=[igst_charge]))

        aligned = align_item_charges([first, second])

        names = ["cgst @9%", "sgst @9%", "igst @18%"]
        assert [c.charge_name for c in aligned[0].tax_details] == names
        assert [c.charge_name for c in aligned[1].tax_details] == names
        assert [c.status for c in aligned[0].tax_details] == [1, 1, 0]
        assert [c.status for c in aligned[1].tax_details] == [0, 0, 1]
        assert aligned[1].tax_details[0].charge_amount == 0
        assert aligned[0].tax_details[0].charge_amount == Decimal("16.2")

    def test_inactive_own_charge_is_reactivated(self, basic_item):
        cgst = Charge(charge_name="cgst @9%", nature="percent", charge_value=9, tax_field="cgst", status=0)
        aligned = align_item_charges([replace(basic_item, tax_details=[cgst])])
        assert aligned[0].tax_details[0].status == 1

    def test_aligned_rows_price_consistently(self, basic_item, low_rate_item, igst_charge):
        rows = align_item_charges([price_item(basic_item), price_item(replace(low_rate_item, tax_details=[igst_charge]))])
        repriced = [price_item(r) for r in rows]
        assert repriced[0].amount.total == Decimal("212.4")
        assert repriced[1].amount.igst == Decimal("36")
        assert repriced[1].amount.cgst == 0
