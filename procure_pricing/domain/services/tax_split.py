# procure_pricing/domain/services/tax_split.py
"""
Tax split policies: which buckets an item's nominal tax rate is divided into
when its tax lines are generated automatically.

  intra_state      CGST + SGST (rate / 2 each)
  inter_state      IGST (full rate)
  union_territory  CGST + UTGST (rate / 2 each)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from procure_pricing.core.money import HUNDRED, round2, to_decimal
from procure_pricing.domain.models.pricing import (
    Charge,
    ChargeNature,
    ChargeOn,
    Numeric,
)

logger = logging.getLogger("tax_split")


@dataclass(frozen=True)
class TaxSplitPolicy:
    name: str
    tax_fields: tuple[str, ...]

    def build_charges(self, tax_rate: Numeric, taxable: Decimal) -> list[Charge]:
        """Generate one active percent charge per bucket. No rate -> no charges."""
        rate = to_decimal(tax_rate)
        if not rate:
            return []

        share = rate / len(self.tax_fields)
        return [
            Charge(
                charge_name=f"{tax_field} @{_format_rate(share)}%",
                charge_type="",
                nature=ChargeNature.PERCENT.value,
                charge_on=ChargeOn.ITEM.value,
                charge_value=round2(share),
                charge_amount=round2(taxable / HUNDRED * share),
                tax_field=tax_field,
                status=1,
            )
            for tax_field in self.tax_fields
        ]


INTRA_STATE = TaxSplitPolicy("intra_state", ("cgst", "sgst"))
INTER_STATE = TaxSplitPolicy("inter_state", ("igst",))
UNION_TERRITORY = TaxSplitPolicy("union_territory", ("cgst", "utgst"))

POLICIES = {p.name: p for p in (INTRA_STATE, INTER_STATE, UNION_TERRITORY)}


def policy_for(regime: str | None) -> TaxSplitPolicy:
    """Look up a policy by regime name, falling back to intra-state."""
    policy = POLICIES.get((regime or "").strip().lower())
    if policy is None:
        logger.warning("Unknown tax regime %r, falling back to %s", regime, INTRA_STATE.name)
        return INTRA_STATE
    return policy


def _format_rate(rate: Decimal) -> str:
    """9 -> '9', 2.50 -> '2.5'."""
    return format(rate.normalize(), "f")
