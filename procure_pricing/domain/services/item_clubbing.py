# procure_pricing/domain/services/item_clubbing.py
"""
Clubbing of requisition rows that share an item code.

An RFQ can pull the same item from several indents. Vendors quote one row per
item code, so rows are clubbed for editing and de-clubbed again on save:

    club_items(rows)              -> one row per item code + qty map
    declub_items(clubbed, qty_map) -> one row per original indent line

Only quantities survive the round trip. Rate, discount and tax fields of the
first row of each item code are applied to every indent on de-club.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from procure_pricing.core.money import to_decimal
from procure_pricing.domain.models.pricing import LineItem, QtyMapEntry
from procure_pricing.domain.services.line_item_pricer import price_item
from procure_pricing.domain.services.tax_split import INTRA_STATE, TaxSplitPolicy

logger = logging.getLogger("item_clubbing")

# (clubbed row so far, next row with the same item code) -> new clubbed row
MergePolicy = Callable[[LineItem, LineItem], LineItem]


class ClubbingConflictError(Exception):
    """Raised by strict merge policies when rows cannot be clubbed."""


@dataclass
class ClubbedItems:
    items: list[LineItem] = field(default_factory=list)
    qty_map: list[QtyMapEntry] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Merge policies
# ---------------------------------------------------------------------------

def seed_wins(seed: LineItem, contributor: LineItem) -> LineItem:
    """Add the contributor's quantity; everything else comes from the seed."""
    return replace(seed, qty=to_decimal(seed.qty) + to_decimal(contributor.qty))


def reject_conflicting_rates(seed: LineItem, contributor: LineItem) -> LineItem:
    """Like ``seed_wins``, but refuse to club rows quoted at different rates."""
    if to_decimal(seed.rate) != to_decimal(contributor.rate):
        logger.warning(
            "Rate conflict clubbing %s: %s (indent %s) vs %s (indent %s)",
            seed.item_code, seed.rate, seed.indent_number,
            contributor.rate, contributor.indent_number,
        )
        raise ClubbingConflictError(
            f"Item {seed.item_code} has different rates on indents "
            f"{seed.indent_number} and {contributor.indent_number}"
        )
    return seed_wins(seed, contributor)


# ---------------------------------------------------------------------------
# Club / de-club
# ---------------------------------------------------------------------------

def club_items(
    items: list[LineItem],
    merge_policy: MergePolicy = seed_wins,
    policy: TaxSplitPolicy = INTRA_STATE,
) -> ClubbedItems:
    """Merge rows by item code (first-seen order) and record every source row."""
    clubbed: dict[str, LineItem] = {}
    qty_map: list[QtyMapEntry] = []

    for item in items:
        existing = clubbed.get(item.item_code)
        clubbed[item.item_code] = item if existing is None else merge_policy(existing, item)
        qty_map.append(
            QtyMapEntry(
                indent_number=item.indent_number,
                item_code=item.item_code,
                qty=to_decimal(item.qty),
            )
        )

    logger.debug("Clubbed %d rows into %d items", len(items), len(clubbed))

    # Summed quantities change the basic amount, so taxes are rebuilt
    return ClubbedItems(
        items=[price_item(i, regenerate_taxes=True, policy=policy) for i in clubbed.values()],
        qty_map=qty_map,
    )


def declub_items(
    items: list[LineItem],
    qty_map: list[QtyMapEntry],
    policy: TaxSplitPolicy = INTRA_STATE,
) -> list[LineItem]:
    """
    Rebuild one row per qty-map entry from the clubbed rows, in qty-map order.
    Entries whose item code is no longer present are dropped.
    """
    by_code = {item.item_code: item for item in items}
    result: list[LineItem] = []

    for entry in qty_map:
        source = by_code.get(entry.item_code)
        if source is None:
            logger.debug("Dropping %s:%s, item removed while clubbed", entry.indent_number, entry.item_code)
            continue
        row = replace(source, indent_number=entry.indent_number, qty=entry.qty)
        result.append(price_item(row, regenerate_taxes=True, policy=policy))

    return result
