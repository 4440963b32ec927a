# medbill/api/v1/schemas/billing.py
"""Request schemas for the billing endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from medbill.domain.models.invoice import Charges, EditableField, InvoiceDraft, LineItem
from medbill.domain.services.rounding import RoundingMethod


class BillingRequest(BaseModel):
    """Base for billing request bodies: amounts must be finite numbers."""

    model_config = ConfigDict(allow_inf_nan=False)


class ComputeLineRequest(BillingRequest):
    """Forward calculation for a single line."""

    quantity: float = Field(ge=0)
    base_rate: float = Field(ge=0, description="Unit price excluding GST")
    tax_rate_percent: float = Field(default=0, ge=0, le=100)
    discount_percent: float = Field(default=0, ge=0, le=100)
    flat_discount: float | None = Field(
        default=None,
        ge=0,
        description="Fixed discount amount; replaces discount_percent when set",
    )


class LineItemInput(BillingRequest):
    """A line as the client holds it (inputs plus the pinned field, if any)."""

    product_id: str | None = None
    product_name: str = ""
    quantity_sold: float = Field(default=1, ge=0)
    free_quantity: float = Field(default=0, ge=0)
    base_rate: float = Field(default=0, ge=0)
    tax_rate_percent: float = Field(default=0, ge=0, le=100)
    scheme_discount_percent: float = Field(default=0, ge=0, le=100)
    available_stock: float | None = Field(default=None, ge=0)

    pinned_field: EditableField | None = None
    pinned_value: float | None = None

    def to_domain(self) -> LineItem:
        item = LineItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity_sold=self.quantity_sold,
            free_quantity=self.free_quantity,
            base_rate=self.base_rate,
            tax_rate_percent=self.tax_rate_percent,
            scheme_discount_percent=self.scheme_discount_percent,
            available_stock=self.available_stock,
        )
        if self.pinned_field is not None and self.pinned_value is not None:
            setattr(item, self.pinned_field.value, self.pinned_value)
            item.pinned_field = self.pinned_field.value
        return item


class EditLineRequest(BillingRequest):
    """One keystroke-level edit to one line."""

    item: LineItemInput
    field: EditableField
    value: float | str | None = Field(default=None, description="Raw user input; non-numeric becomes 0")


class ChargesInput(BillingRequest):
    shipping: float = Field(default=0, ge=0)
    handling: float = Field(default=0, ge=0)
    other: float = Field(default=0, ge=0)
    gst_on_charges: bool = False
    gst_percent: float = Field(default=0, ge=0, le=100)

    def to_domain(self) -> Charges:
        return Charges(**self.model_dump())


class DraftRequest(BillingRequest):
    """Whole draft: recomputed wholesale on every call."""

    items: list[LineItemInput] = Field(default_factory=list)
    invoice_discount_percent: float = Field(default=0, ge=0, le=100)
    charges: ChargesInput = Field(default_factory=ChargesInput)
    round_off_method: RoundingMethod | None = None
    include_words: bool = True

    def to_domain(self) -> InvoiceDraft:
        return InvoiceDraft(
            items=[item.to_domain() for item in self.items],
            invoice_discount_percent=self.invoice_discount_percent,
            charges=self.charges.to_domain(),
        )


class ValidateDraftRequest(DraftRequest):
    """Draft plus current stock per product_id, for last-mile stock checks."""

    current_stock: dict[str, float] | None = None


class CascadeRequest(BillingRequest):
    amount: float = Field(ge=0)
    discounts: list[float] = Field(min_length=1)


class AmountInWordsRequest(BillingRequest):
    amount: float
