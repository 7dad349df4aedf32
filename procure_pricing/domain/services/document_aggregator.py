# procure_pricing/domain/services/document_aggregator.py
"""
Document totals.

Combines already-priced line items with document-level ad-hoc charges
(packaging, freight, ...) and document-level tax lines into one
DocumentAmount.

A document is either inter-state (IGST) or intra-state (CGST + SGST); only
the regime actually present is rounded.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from procure_pricing.core.money import HUNDRED, ZERO, round2, to_decimal
from procure_pricing.domain.models.pricing import (
    AdhocCharge,
    AmountBreakdown,
    Charge,
    DocumentAmount,
    LineItem,
    PricedDocument,
)
from procure_pricing.domain.services.charge_resolver import ChargeScope, resolve_charges

logger = logging.getLogger("document_aggregator")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def aggregate_document(
    items: list[LineItem],
    charges: dict[str, AdhocCharge] | None = None,
    tax_details: list[Charge] | None = None,
) -> DocumentAmount:
    """Sum priced items, ad-hoc charges and document tax lines."""
    amount, _, _ = _aggregate(items, charges or {}, tax_details or [])
    return amount


def price_document(document: PricedDocument) -> PricedDocument:
    """
    Return a copy of ``document`` with a fresh ``amount`` and with its ad-hoc
    charges and tax lines carrying their resolved values.
    """
    amount, charges, tax_details = _aggregate(
        document.items, document.charges, document.tax_details
    )
    return replace(document, charges=charges, tax_details=tax_details, amount=amount)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def _aggregate(
    items: list[LineItem],
    charges: dict[str, AdhocCharge],
    tax_details: list[Charge],
) -> tuple[DocumentAmount, dict[str, AdhocCharge], list[Charge]]:
    amount, total_qty = _sum_items(items)
    amount = _round_regime(amount)

    charges, extra = _resolve_adhoc_charges(items, charges)
    amount = replace(
        amount,
        other_charges=amount.other_charges + extra,
        total=amount.total + extra,
    )

    # Document tax lines are keyed off the post-discount base of the items
    base = amount.basic - amount.discount
    amount, tax_details = resolve_charges(
        tax_details, amount, base, total_qty, scope=ChargeScope.DOCUMENT
    )

    amount = replace(
        amount,
        other_charges=round2(amount.other_charges),
        total=round2(amount.total),
    )

    logger.debug(
        "Document aggregated: %d items, qty=%s, basic=%s, total=%s",
        len(items), total_qty, amount.basic, amount.total,
    )
    return amount, charges, tax_details


def _sum_items(items: list[LineItem]) -> tuple[DocumentAmount, Decimal]:
    """Sum the selected items' breakdowns; unpriced items count as zero."""
    amount = DocumentAmount()
    total_qty = ZERO

    for item in items:
        if not item.selected:
            continue
        breakdown = item.amount or AmountBreakdown()
        total_qty += to_decimal(item.qty)
        amount = replace(
            amount,
            basic=amount.basic + to_decimal(breakdown.basic),
            discount=amount.discount + to_decimal(breakdown.discount),
            total=amount.total + to_decimal(breakdown.total),
            igst=amount.igst + to_decimal(breakdown.igst),
            cgst=amount.cgst + to_decimal(breakdown.cgst),
            sgst=amount.sgst + to_decimal(breakdown.sgst),
            utgst=amount.utgst + to_decimal(breakdown.utgst),
        )

    return amount, total_qty


def _round_regime(amount: DocumentAmount) -> DocumentAmount:
    """Round basic/discount and the tax regime in use (IGST wins if present)."""
    amount = replace(amount, basic=round2(amount.basic), discount=round2(amount.discount))

    if amount.igst:
        if amount.cgst or amount.sgst or amount.utgst:
            logger.warning(
                "Document mixes IGST (%s) with CGST/SGST/UTGST (%s/%s/%s)",
                amount.igst, amount.cgst, amount.sgst, amount.utgst,
            )
        return replace(amount, igst=round2(amount.igst))

    return replace(
        amount,
        cgst=round2(amount.cgst),
        sgst=round2(amount.sgst),
        utgst=round2(amount.utgst),
    )


def _resolve_adhoc_charges(
    items: list[LineItem],
    charges: dict[str, AdhocCharge],
) -> tuple[dict[str, AdhocCharge], Decimal]:
    """
    Attach GST to each ad-hoc charge at the highest item tax rate on the
    document. Returns the resolved charges and their combined gross amount.
    """
    gst_rate = max((to_decimal(i.tax_rate) for i in items), default=ZERO)
    resolved: dict[str, AdhocCharge] = {}
    extra = ZERO

    for key, charge in charges.items():
        value = to_decimal(charge.amount)
        if value <= ZERO:
            resolved[key] = charge
            continue

        gst_amount = round2(value * (gst_rate / HUNDRED))
        resolved[key] = replace(charge, amount=value, gst_rate=gst_rate, gst_amount=gst_amount)
        extra += value + gst_amount

    return resolved, extra
