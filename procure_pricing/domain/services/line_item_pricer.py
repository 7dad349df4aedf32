# procure_pricing/domain/services/line_item_pricer.py
"""
Line item pricing.

Turns one LineItem's raw inputs (rate, qty, discount, tax rate, charges) into
its AmountBreakdown:

1. basic    = rate * qty
2. discount = whichever of percent / amount drives the row; the other one is
              re-derived
3. taxable  = basic - discount
4. charges  = existing tax lines, or a fresh set from the tax split policy
5. total    = taxable + charges - discount charges

Input is never validated here: non-numeric values price as zero so that a
half-edited row still shows a total.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from procure_pricing.core.money import HUNDRED, ZERO, round2, to_decimal
from procure_pricing.domain.models.pricing import (
    AmountBreakdown,
    DiscountType,
    LineItem,
)
from procure_pricing.domain.services.charge_resolver import ChargeScope, resolve_charges
from procure_pricing.domain.services.tax_split import INTRA_STATE, TaxSplitPolicy

logger = logging.getLogger("line_item_pricer")


def price_item(
    item: LineItem,
    regenerate_taxes: bool = False,
    policy: TaxSplitPolicy = INTRA_STATE,
) -> LineItem:
    """
    Return a copy of ``item`` with its discount fields normalised, its tax
    lines resolved and ``amount`` filled in.

    ``regenerate_taxes`` discards the item's existing tax lines and builds new
    ones from ``item.tax_rate`` using ``policy``. Items that carry no tax lines
    get generated ones either way.
    """
    rate = to_decimal(item.rate)
    qty = to_decimal(item.qty)
    basic = round2(rate * qty)

    discount_percent, discount_amount = normalise_discount(item, basic)
    discount = to_decimal(discount_amount)
    taxable = basic - discount

    amount = AmountBreakdown(
        basic=basic,
        taxable=round2(taxable),
        discount=round2(discount),
        total=taxable,
    )

    if item.tax_details and not regenerate_taxes:
        charges = list(item.tax_details)
    else:
        charges = policy.build_charges(item.tax_rate, taxable)

    amount, tax_details = resolve_charges(charges, amount, taxable, scope=ChargeScope.ITEM)
    amount = replace(amount, total=round2(amount.total))

    logger.debug(
        "Priced %s:%s basic=%s taxable=%s total=%s (%d charges)",
        item.indent_number, item.item_code, amount.basic, amount.taxable, amount.total, len(tax_details),
    )

    return replace(
        item,
        rate=rate,
        qty=qty,
        discount_percent=discount_percent,
        discount_amount=discount_amount,
        tax_details=tax_details,
        amount=amount,
    )


def normalise_discount(item: LineItem, basic: Decimal) -> tuple[Decimal, Decimal]:
    """
    Return ``(discount_percent, discount_amount)`` with the non-driving field
    re-derived from the driving one. Without a discount type both are
    returned as supplied.
    """
    percent = to_decimal(item.discount_percent)
    amount = to_decimal(item.discount_amount)

    if item.discount_type == DiscountType.PERCENT:
        amount = round2(basic / HUNDRED * percent)
    elif item.discount_type == DiscountType.AMOUNT:
        percent = round2(_percent_of(amount, basic, item))

    return percent, amount


def _percent_of(part: Decimal, whole: Decimal, item: LineItem) -> Decimal:
    if whole:
        return part / whole * HUNDRED

    # TODO: decide whether a zero-basic discount percent should clamp to 0;
    # for now the derived value is left non-finite, callers must guard it.
    logger.warning(
        "Discount percent derived from zero basic for %s:%s", item.indent_number, item.item_code,
    )
    if not part:
        return Decimal("NaN")
    return Decimal("Infinity") if part > ZERO else Decimal("-Infinity")
