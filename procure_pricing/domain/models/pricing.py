# procure_pricing/domain/models/pricing.py
"""
Domain dataclasses for line-item pricing.

LineItem / Charge:      raw inputs coming from quotation and PO forms.
AmountBreakdown:        resolved amounts of one line item.
DocumentAmount:         resolved amounts of a whole document.
QtyMapEntry:            pointer back to one source requisition row (clubbing).

Numeric inputs are kept as supplied (Decimal, int, float, str or None) and
coerced only when a price is computed; derived fields are always Decimal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from procure_pricing.core.money import ZERO

Numeric = Union[Decimal, int, float, str, None]

# Buckets a resolved charge can be accumulated into
TAX_FIELDS = ("igst", "cgst", "sgst", "utgst")


class ChargeNature(str, Enum):
    PERCENT = "percent"
    AMOUNT = "amount"
    DISCOUNT = "discount"
    ON_UNIT = "onUnit"


class ChargeOn(str, Enum):
    ITEM = "item"
    BASE = "base"


class DiscountType(str, Enum):
    PERCENT = "percent"
    AMOUNT = "amount"


# ---------------------------------------------------------------------------
# Charges
# ---------------------------------------------------------------------------

@dataclass
class Charge:
    """One tax line or ad-hoc adjustment, attached to an item or a document."""
    charge_name: str = ""
    nature: str = ChargeNature.PERCENT.value
    charge_value: Numeric = ZERO
    charge_amount: Decimal = ZERO
    tax_field: str = ""
    charge_on: str = ChargeOn.ITEM.value
    charge_type: str = ""
    status: int = 1


@dataclass
class AdhocCharge:
    """Document-level extra charge such as packaging & forwarding."""
    amount: Numeric = ZERO
    gst_rate: Decimal = ZERO
    gst_amount: Decimal = ZERO
    description: str = ""


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

@dataclass
class AmountBreakdown:
    basic: Decimal = ZERO
    taxable: Decimal = ZERO
    discount: Decimal = ZERO
    igst: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    utgst: Decimal = ZERO
    total: Decimal = ZERO


@dataclass
class DocumentAmount:
    basic: Decimal = ZERO
    discount: Decimal = ZERO
    other_charges: Decimal = ZERO
    igst: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    utgst: Decimal = ZERO
    total: Decimal = ZERO


# ---------------------------------------------------------------------------
# Line items and documents
# ---------------------------------------------------------------------------

@dataclass
class LineItem:
    """One priced row of a quotation / purchase order."""
    indent_number: str = ""
    item_code: str = ""
    rate: Numeric = ZERO
    qty: Numeric = ZERO
    discount_type: str | None = None
    discount_percent: Numeric = ZERO
    discount_amount: Numeric = ZERO
    tax_rate: Numeric = ZERO
    tax_details: list[Charge] = field(default_factory=list)
    amount: AmountBreakdown | None = None
    # Quotations let the vendor tick which rows they are quoting for
    selected: bool = True
    # Pass-through fields (description, unit, HSN code, ...)
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class QtyMapEntry:
    indent_number: str
    item_code: str
    qty: Decimal


@dataclass
class PricedDocument:
    """A quotation or PO: its items, ad-hoc charges, document taxes and totals."""
    items: list[LineItem] = field(default_factory=list)
    charges: dict[str, AdhocCharge] = field(default_factory=dict)
    tax_details: list[Charge] = field(default_factory=list)
    amount: DocumentAmount = field(default_factory=DocumentAmount)


def indent_key(item: LineItem | QtyMapEntry) -> str:
    """Composite identity of a requisition line: ``<indent number>:<item code>``."""
    return f"{item.indent_number}:{item.item_code}"
