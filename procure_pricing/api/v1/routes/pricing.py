# procure_pricing/api/v1/routes/pricing.py
"""
Pricing endpoints used by the quotation and purchase-order screens:
item and document pricing, clubbing round trip, charge application.

All endpoints are stateless; the caller sends the full records and gets the
re-priced records back.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from procure_pricing.api.v1.envelope import error, ok
from procure_pricing.api.v1.schemas.pricing import (
    ApplyChargeRequest,
    ClubRequest,
    ClubResponse,
    DeclubRequest,
    DocumentSchema,
    ItemsRequest,
    LineItemSchema,
    PriceItemRequest,
    QtyMapEntrySchema,
    dump_items,
)
from procure_pricing.config.settings import settings
from procure_pricing.domain.services.document_aggregator import price_document
from procure_pricing.domain.services.document_editing import align_item_charges, apply_charge
from procure_pricing.domain.services.item_clubbing import (
    ClubbingConflictError,
    club_items,
    declub_items,
    reject_conflicting_rates,
    seed_wins,
)
from procure_pricing.domain.services.line_item_pricer import price_item
from procure_pricing.domain.services.tax_split import TaxSplitPolicy, policy_for

logger = logging.getLogger("api.v1.pricing")

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def _tax_policy() -> TaxSplitPolicy:
    return policy_for(settings.TAX_REGIME)


# ---------------------------------------------------------------------------
# Item / document pricing
# ---------------------------------------------------------------------------

@router.post("/item", response_model=dict)
async def price_line_item(body: PriceItemRequest):
    """Price one row: discount normalisation, tax lines and amount breakdown."""
    priced = price_item(
        body.item.to_domain(),
        regenerate_taxes=body.regenerate_taxes,
        policy=_tax_policy(),
    )
    return ok(data=LineItemSchema.from_domain(priced))


@router.post("/document", response_model=dict)
async def price_full_document(body: DocumentSchema):
    """Aggregate already-priced rows, ad-hoc charges and document tax lines."""
    return ok(data=DocumentSchema.from_domain(price_document(body.to_domain())))


@router.post("/document/charges", response_model=dict)
async def add_document_charge(body: ApplyChargeRequest):
    """Add one charge to every row (``chargeOn=item``) or to the document."""
    document = apply_charge(body.document.to_domain(), body.charge.to_domain(), policy=_tax_policy())
    return ok(data=DocumentSchema.from_domain(document))


@router.post("/items/align-charges", response_model=dict)
async def align_charges(body: ItemsRequest):
    """Give every row the same tax lines; missing ones are added inactive."""
    return ok(data=dump_items(align_item_charges([i.to_domain() for i in body.items])))


# ---------------------------------------------------------------------------
# Clubbing
# ---------------------------------------------------------------------------

@router.post("/club", response_model=dict)
async def club(body: ClubRequest):
    """Merge rows sharing an item code; returns the rows and the qty map."""
    merge_policy = reject_conflicting_rates if body.reject_rate_conflicts else seed_wins
    try:
        result = club_items(
            [i.to_domain() for i in body.items],
            merge_policy=merge_policy,
            policy=_tax_policy(),
        )
    except ClubbingConflictError as exc:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=error(str(exc)))

    return ok(
        data=ClubResponse(
            items=[LineItemSchema.from_domain(i) for i in result.items],
            qty_map=[
                QtyMapEntrySchema(indent_number=e.indent_number, item_code=e.item_code, qty=e.qty)
                for e in result.qty_map
            ],
        )
    )


@router.post("/declub", response_model=dict)
async def declub(body: DeclubRequest):
    """Split clubbed rows back into one row per qty-map entry."""
    items = declub_items(
        [i.to_domain() for i in body.items],
        body.qty_map_to_domain(),
        policy=_tax_policy(),
    )
    logger.info("De-clubbed %d rows into %d indent lines", len(body.items), len(items))
    return ok(data=dump_items(items))
