# procure_pricing/api/v1/schemas/pricing.py
"""
Request and response schemas for pricing endpoints.

Field names follow the portal's camelCase wire shape (``indentNumber``,
``taxDetails``, ``chargeValue`` ...). Numeric inputs accept numbers or
strings; the engine coerces anything unusable to zero.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from procure_pricing.domain.models.pricing import (
    AdhocCharge,
    AmountBreakdown,
    Charge,
    DocumentAmount,
    LineItem,
    PricedDocument,
    QtyMapEntry,
)

# Derived percentages can be non-finite (discount on a zero basic)
RawNumber = Union[Annotated[Decimal, Field(allow_inf_nan=True)], str, None]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

class ChargeSchema(_CamelModel):
    charge_name: str = ""
    charge_type: str = ""
    nature: str = "percent"
    charge_on: str = "item"
    charge_value: RawNumber = Decimal("0")
    charge_amount: Decimal = Decimal("0")
    tax_field: str = ""
    status: int = 1

    def to_domain(self) -> Charge:
        return Charge(
            charge_name=self.charge_name,
            charge_type=self.charge_type,
            nature=self.nature,
            charge_on=self.charge_on,
            charge_value=self.charge_value,
            charge_amount=self.charge_amount,
            tax_field=self.tax_field,
            status=self.status,
        )

    @classmethod
    def from_domain(cls, charge: Charge) -> ChargeSchema:
        return cls(
            charge_name=charge.charge_name,
            charge_type=charge.charge_type,
            nature=charge.nature,
            charge_on=charge.charge_on,
            charge_value=charge.charge_value,
            charge_amount=charge.charge_amount,
            tax_field=charge.tax_field,
            status=charge.status,
        )


class AmountBreakdownSchema(_CamelModel):
    basic: Decimal = Decimal("0")
    taxable: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    igst: Decimal = Decimal("0")
    cgst: Decimal = Decimal("0")
    sgst: Decimal = Decimal("0")
    utgst: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class DocumentAmountSchema(_CamelModel):
    basic: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    other_charges: Decimal = Decimal("0")
    igst: Decimal = Decimal("0")
    cgst: Decimal = Decimal("0")
    sgst: Decimal = Decimal("0")
    utgst: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class AdhocChargeSchema(_CamelModel):
    amount: RawNumber = Decimal("0")
    gst_rate: Decimal = Decimal("0")
    gst_amount: Decimal = Decimal("0")
    description: str = ""


class QtyMapEntrySchema(_CamelModel):
    indent_number: str
    item_code: str
    qty: Decimal = Decimal("0")


class LineItemSchema(_CamelModel):
    """A quotation / PO row. Unknown keys (description, unit ...) pass through."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    indent_number: str = ""
    item_code: str = ""
    rate: RawNumber = Decimal("0")
    qty: RawNumber = Decimal("0")
    discount_type: str | None = None
    discount_percent: RawNumber = Decimal("0")
    discount_amount: RawNumber = Decimal("0")
    tax_rate: RawNumber = Decimal("0")
    tax_details: list[ChargeSchema] = Field(default_factory=list)
    amount: AmountBreakdownSchema | None = None
    selected: bool = True

    def to_domain(self) -> LineItem:
        return LineItem(
            indent_number=self.indent_number,
            item_code=self.item_code,
            rate=self.rate,
            qty=self.qty,
            discount_type=self.discount_type,
            discount_percent=self.discount_percent,
            discount_amount=self.discount_amount,
            tax_rate=self.tax_rate,
            tax_details=[c.to_domain() for c in self.tax_details],
            amount=AmountBreakdown(**self.amount.model_dump()) if self.amount else None,
            selected=self.selected,
            attributes=dict(self.model_extra or {}),
        )

    @classmethod
    def from_domain(cls, item: LineItem) -> LineItemSchema:
        return cls(
            indent_number=item.indent_number,
            item_code=item.item_code,
            rate=item.rate,
            qty=item.qty,
            discount_type=item.discount_type,
            discount_percent=item.discount_percent,
            discount_amount=item.discount_amount,
            tax_rate=item.tax_rate,
            tax_details=[ChargeSchema.from_domain(c) for c in item.tax_details],
            amount=AmountBreakdownSchema(**vars(item.amount)) if item.amount else None,
            selected=item.selected,
            **item.attributes,
        )


class DocumentSchema(_CamelModel):
    items: list[LineItemSchema] = Field(default_factory=list)
    charges: dict[str, AdhocChargeSchema] = Field(default_factory=dict)
    tax_details: list[ChargeSchema] = Field(default_factory=list)
    amount: DocumentAmountSchema | None = None

    def to_domain(self) -> PricedDocument:
        return PricedDocument(
            items=[i.to_domain() for i in self.items],
            charges={
                key: AdhocCharge(**c.model_dump()) for key, c in self.charges.items()
            },
            tax_details=[c.to_domain() for c in self.tax_details],
            amount=DocumentAmount(**self.amount.model_dump()) if self.amount else DocumentAmount(),
        )

    @classmethod
    def from_domain(cls, document: PricedDocument) -> DocumentSchema:
        return cls(
            items=[LineItemSchema.from_domain(i) for i in document.items],
            charges={
                key: AdhocChargeSchema(**vars(c)) for key, c in document.charges.items()
            },
            tax_details=[ChargeSchema.from_domain(c) for c in document.tax_details],
            amount=DocumentAmountSchema(**vars(document.amount)),
        )


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------

class PriceItemRequest(_CamelModel):
    item: LineItemSchema
    regenerate_taxes: bool = Field(
        default=False,
        description="Rebuild the item's tax lines from its tax rate",
    )


class ClubRequest(_CamelModel):
    items: list[LineItemSchema]
    reject_rate_conflicts: bool = Field(
        default=False,
        description="Refuse to club rows of the same item quoted at different rates",
    )


class ClubResponse(_CamelModel):
    items: list[LineItemSchema]
    qty_map: list[QtyMapEntrySchema]


class DeclubRequest(_CamelModel):
    items: list[LineItemSchema]
    qty_map: list[QtyMapEntrySchema]

    def qty_map_to_domain(self) -> list[QtyMapEntry]:
        return [
            QtyMapEntry(indent_number=e.indent_number, item_code=e.item_code, qty=e.qty)
            for e in self.qty_map
        ]


class ApplyChargeRequest(_CamelModel):
    document: DocumentSchema
    charge: ChargeSchema


class ItemsRequest(_CamelModel):
    items: list[LineItemSchema]


class ItemsResponse(_CamelModel):
    items: list[LineItemSchema]


def dump_items(items: list[LineItem]) -> dict[str, Any]:
    """Serialize domain rows as an ``ItemsResponse`` payload."""
    return ItemsResponse(items=[LineItemSchema.from_domain(i) for i in items]).model_dump(
        mode="json", by_alias=True
    )
