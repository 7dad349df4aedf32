# procure_pricing/domain/services/document_editing.py
"""
Edits on a priced document that always end in a full re-aggregation:
re-pricing one row, adding a charge, and aligning tax lines across rows.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from procure_pricing.core.money import ZERO
from procure_pricing.domain.models.pricing import (
    Charge,
    ChargeOn,
    LineItem,
    PricedDocument,
    indent_key,
)
from procure_pricing.domain.services.document_aggregator import price_document
from procure_pricing.domain.services.line_item_pricer import price_item
from procure_pricing.domain.services.tax_split import INTRA_STATE, TaxSplitPolicy

logger = logging.getLogger("document_editing")


def reprice_document_item(
    document: PricedDocument,
    item: LineItem,
    regenerate_taxes: bool = True,
    policy: TaxSplitPolicy = INTRA_STATE,
) -> PricedDocument:
    """Replace the row with ``item``'s indent key by its re-priced version."""
    key = indent_key(item)
    items = [
        price_item(item, regenerate_taxes=regenerate_taxes, policy=policy)
        if indent_key(existing) == key
        else existing
        for existing in document.items
    ]
    return price_document(replace(document, items=items))


def apply_charge(
    document: PricedDocument,
    charge: Charge,
    policy: TaxSplitPolicy = INTRA_STATE,
) -> PricedDocument:
    """
    Add a charge to the document.

    ``charge_on == "item"`` appends it to every row's tax lines and re-prices
    each row with its existing lines; anything else becomes a document-level
    tax line.
    """
    if charge.charge_on == ChargeOn.ITEM:
        items = [
            price_item(replace(i, tax_details=[*i.tax_details, charge]), policy=policy)
            for i in document.items
        ]
        document = replace(document, items=items)
    else:
        document = replace(document, tax_details=[*document.tax_details, charge])

    logger.info("Applied %s charge %r (%s)", charge.charge_on, charge.charge_name, charge.nature)
    return price_document(document)


def align_item_charges(items: list[LineItem]) -> list[LineItem]:
    """
    Give every row the same tax lines, keyed by charge name in order of first
    appearance. Lines a row already had are kept and activated; lines it
    lacked are added inactive with a zero amount. Rows are not re-priced.
    """
    union: dict[str, Charge] = {}
    for item in items:
        for charge in item.tax_details:
            union.setdefault(charge.charge_name, charge)

    aligned: list[LineItem] = []
    for item in items:
        own = {c.charge_name: c for c in item.tax_details}
        tax_details = [
            replace(own[name], status=1)
            if name in own
            else replace(charge, status=0, charge_amount=ZERO)
            for name, charge in union.items()
        ]
        aligned.append(replace(item, tax_details=tax_details))

    return aligned
