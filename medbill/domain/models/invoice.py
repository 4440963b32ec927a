# medbill/domain/models/invoice.py
"""
Domain dataclasses for invoice drafts.

LineItem:       one product row on a draft; inputs plus derived amounts.
InvoiceTotals:  invoice-level projection of the current line items.
InvoiceDraft:   the editable draft (line items + invoice-level parameters).

Derived amounts are never a source of truth.  They are regenerated from
the inputs (quantity, free quantity, base rate, tax rate, scheme discount)
every time anything on the draft changes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class EditableField(str, Enum):
    """Line-item fields a user can type into."""

    QUANTITY_SOLD = "quantity_sold"
    FREE_QUANTITY = "free_quantity"
    BASE_RATE = "base_rate"
    SCHEME_DISCOUNT_PERCENT = "scheme_discount_percent"
    # derived fields; editing one back-solves base_rate
    NET_RATE = "net_rate"
    BASE_AMOUNT = "base_amount"
    TOTAL_AMOUNT = "total_amount"


INVERSE_FIELDS = frozenset({
    EditableField.NET_RATE,
    EditableField.BASE_AMOUNT,
    EditableField.TOTAL_AMOUNT,
})


@dataclass
class LineAmounts:
    """Full derived field set for one line, as produced by forward mode."""
    quantity: float = 0
    base_rate: float = 0
    tax_rate_percent: float = 0
    discount_percent: float = 0
    base_amount: float = 0
    discount_amount: float = 0
    taxable_amount: float = 0
    tax_amount: float = 0
    cgst_amount: float = 0
    sgst_amount: float = 0
    igst_amount: float = 0
    net_rate: float = 0
    total_amount: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LineItem:
    """A product row on an invoice draft."""

    # Inputs (persisted)
    quantity_sold: float = 1
    free_quantity: float = 0
    base_rate: float = 0
    tax_rate_percent: float = 0
    scheme_discount_percent: float = 0

    # Catalog / inventory context
    product_id: str | None = None
    product_name: str = ""
    available_stock: float | None = None
    # derived field the user typed last; recompute keeps its value as entered
    pinned_field: str | None = None

    # Derived (recomputed, never edited independently)
    base_amount: float = 0
    discount_amount: float = 0
    taxable_amount: float = 0
    tax_amount: float = 0
    cgst_amount: float = 0
    sgst_amount: float = 0
    igst_amount: float = 0
    net_rate: float = 0
    total_amount: float = 0

    def to_dict(self) -> dict:
        return asdict(self)

    def to_submission(self) -> dict[str, Any]:
        """Inputs only; the persistence side recomputes everything else."""
        return {
            "product_id": self.product_id,
            "quantity_sold": self.quantity_sold,
            "free_quantity": self.free_quantity,
            "base_rate": self.base_rate,
            "scheme_discount_percent": self.scheme_discount_percent,
            "tax_rate_percent": self.tax_rate_percent,
        }


@dataclass
class CatalogProduct:
    """Product as supplied by the catalog and inventory collaborators."""
    product_id: str
    name: str
    list_price: float           # tax-inclusive
    tax_rate_percent: float
    current_stock: float | None = None
    hsn_code: str = ""
    batch_no: str = ""


@dataclass
class Charges:
    """Invoice-level surcharges, optionally taxed as one extra bucket."""
    shipping: float = 0
    handling: float = 0
    other: float = 0
    gst_on_charges: bool = False
    gst_percent: float = 0

    @property
    def total(self) -> float:
        return self.shipping + self.handling + self.other


@dataclass
class ItemTotals:
    """Plain sums of the derived line fields."""
    base_amount: float = 0
    total_discount: float = 0
    total_taxable: float = 0
    total_gst: float = 0
    total_cgst: float = 0
    total_sgst: float = 0
    total_igst: float = 0
    net_total: float = 0
    item_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class InvoiceTotals:
    """Complete invoice totals: item sums, invoice discount, charges, round-off."""
    base_amount: float = 0
    total_discount: float = 0
    total_taxable: float = 0
    total_gst: float = 0
    total_cgst: float = 0
    total_sgst: float = 0
    total_igst: float = 0
    net_total: float = 0
    item_count: int = 0

    invoice_discount_percent: float = 0
    invoice_discount_amount: float = 0
    net_taxable: float = 0

    shipping_charges: float = 0
    handling_charges: float = 0
    other_charges: float = 0
    total_charges: float = 0
    charges_gst: float = 0

    grand_total: float = 0
    round_off: float = 0
    payable_amount: float = 0

    # False when the totals could not be computed and are all-zero placeholders
    available: bool = True

    @classmethod
    def unavailable(cls) -> InvoiceTotals:
        return cls(available=False)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class InvoiceDraft:
    """An invoice being edited by a single session."""
    items: list[LineItem] = field(default_factory=list)
    invoice_discount_percent: float = 0
    charges: Charges = field(default_factory=Charges)


@dataclass
class DraftSnapshot:
    """Result of recomputing a draft: fresh line items plus totals."""
    items: list[LineItem]
    totals: InvoiceTotals

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "totals": self.totals.to_dict(),
        }


@dataclass
class SubmissionIssue:
    """A reason a draft cannot be submitted yet."""
    code: str                   # "empty_draft" | "invalid_quantity" | "insufficient_stock"
    message: str
    index: int | None = None
    product_id: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)
