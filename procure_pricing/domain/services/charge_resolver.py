# procure_pricing/domain/services/charge_resolver.py
"""
Charge resolution: the monetary effect of one charge against a taxable base.

Natures:
  - percent   taxable / 100 * value, rounded
  - amount    value taken verbatim
  - discount  taxable / 100 * value, rounded; reduces total, feeds the
              discount accumulator instead of a tax bucket
  - onUnit    total quantity * value (document level only)
  - anything else: value taken verbatim
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import TypeVar

from procure_pricing.core.money import HUNDRED, ZERO, round2, to_decimal
from procure_pricing.domain.models.pricing import (
    TAX_FIELDS,
    AmountBreakdown,
    Charge,
    ChargeNature,
    DocumentAmount,
)

logger = logging.getLogger("charge_resolver")

AmountT = TypeVar("AmountT", AmountBreakdown, DocumentAmount)


class ChargeScope(str, Enum):
    ITEM = "item"
    DOCUMENT = "document"


@dataclass
class ChargeResolution:
    """What one charge contributes: its own amount plus deltas to fold in."""
    charge_amount: Decimal = ZERO
    bucket: str | None = None
    bucket_delta: Decimal = ZERO
    discount_delta: Decimal = ZERO
    total_delta: Decimal = ZERO


def resolve_charge(
    charge: Charge,
    taxable: Decimal,
    total_qty: Decimal = ZERO,
    scope: ChargeScope = ChargeScope.ITEM,
) -> ChargeResolution:
    """Resolve a charge against ``taxable`` (and ``total_qty`` for onUnit)."""
    # Inactive charges stay on the record but contribute nothing
    if not charge.status:
        return ChargeResolution()

    value = to_decimal(charge.charge_value)
    base = to_decimal(taxable)

    if charge.nature == ChargeNature.DISCOUNT:
        raw = round2(base / HUNDRED * value)
        # The accumulators take the magnitude; the record keeps the sign
        discount = abs(raw)
        return ChargeResolution(
            charge_amount=ZERO - raw,
            discount_delta=discount,
            total_delta=ZERO - discount,
        )

    if charge.nature == ChargeNature.PERCENT:
        amount = round2(base / HUNDRED * value)
    elif charge.nature == ChargeNature.ON_UNIT and scope == ChargeScope.DOCUMENT:
        amount = to_decimal(total_qty) * value
    else:
        if charge.nature not in (ChargeNature.AMOUNT, ChargeNature.ON_UNIT):
            logger.debug("Unknown charge nature %r on %r, using raw value", charge.nature, charge.charge_name)
        amount = value

    bucket = charge.tax_field if charge.tax_field in TAX_FIELDS else None
    return ChargeResolution(
        charge_amount=amount,
        bucket=bucket,
        bucket_delta=amount if bucket else ZERO,
        total_delta=amount,
    )


def fold_resolution(amount: AmountT, resolution: ChargeResolution) -> AmountT:
    """Return ``amount`` with the resolution's deltas applied."""
    changes = {
        "discount": amount.discount + resolution.discount_delta,
        "total": amount.total + resolution.total_delta,
    }
    if resolution.bucket:
        changes[resolution.bucket] = getattr(amount, resolution.bucket) + resolution.bucket_delta
    return replace(amount, **changes)


def resolve_charges(
    charges: list[Charge],
    amount: AmountT,
    taxable: Decimal,
    total_qty: Decimal = ZERO,
    scope: ChargeScope = ChargeScope.ITEM,
) -> tuple[AmountT, list[Charge]]:
    """Resolve every charge in order; return the folded amount and resolved charges."""
    resolved: list[Charge] = []
    for charge in charges:
        resolution = resolve_charge(charge, taxable, total_qty, scope)
        amount = fold_resolution(amount, resolution)
        resolved.append(replace(charge, charge_amount=resolution.charge_amount))
    return amount, resolved
