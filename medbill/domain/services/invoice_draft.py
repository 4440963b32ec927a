# medbill/domain/services/invoice_draft.py
"""
Invoice draft orchestration.

A draft is owned by one editing session.  Every mutation returns a new
draft; ``recompute`` turns any draft into fresh line items plus wholesale
totals.  Hosts call it after each change instead of wiring up reactive
bindings:

    draft = add_product(draft, product)
    draft = edit_item(draft, 0, "total_amount", "1180")
    snapshot = recompute(draft)

Nothing here is cached.  A host that wants memoisation should key it on the
draft contents outside the engine.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from medbill.domain.errors import DuplicateProductError, LineItemIndexError
from medbill.domain.models.invoice import (
    CatalogProduct,
    Charges,
    DraftSnapshot,
    EditableField,
    InvoiceDraft,
    LineItem,
    SubmissionIssue,
)
from medbill.domain.services import line_items
from medbill.domain.services.invoice_totals import safe_aggregate_complete
from medbill.domain.services.line_items import coerce_number
from medbill.domain.services.rounding import RoundingMethod, clamp

logger = logging.getLogger("invoice_draft")

StockLookup = Callable[[str], "float | None"]


# ---------------------------------------------------------------------------
# Mutations (each returns a new draft)
# ---------------------------------------------------------------------------

def add_product(draft: InvoiceDraft, product: CatalogProduct) -> InvoiceDraft:
    """Append a seeded line for ``product``; a product may appear only once."""
    if any(item.product_id == product.product_id for item in draft.items):
        raise DuplicateProductError(product.product_id, product.name)

    item = line_items.seed_line_item(product)
    logger.debug("Added %s to draft at base rate %s", product.product_id, item.base_rate)
    return replace(draft, items=[*draft.items, item])


def _check_index(draft: InvoiceDraft, index: int) -> None:
    if not 0 <= index < len(draft.items):
        raise LineItemIndexError(index, len(draft.items))


def remove_item(draft: InvoiceDraft, index: int) -> InvoiceDraft:
    _check_index(draft, index)
    return replace(draft, items=[item for i, item in enumerate(draft.items) if i != index])


def edit_item(
    draft: InvoiceDraft,
    index: int,
    field: EditableField | str,
    value: Any,
) -> InvoiceDraft:
    """Apply one field edit to the line at ``index``."""
    _check_index(draft, index)
    items = list(draft.items)
    items[index] = line_items.edit_line_item(items[index], field, value)
    return replace(draft, items=items)


def set_invoice_discount(draft: InvoiceDraft, percent: Any) -> InvoiceDraft:
    return replace(draft, invoice_discount_percent=clamp(coerce_number(percent), 0, 100))


def set_charges(draft: InvoiceDraft, charges: Charges) -> InvoiceDraft:
    return replace(draft, charges=charges)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

def recompute(
    draft: InvoiceDraft,
    round_off_method: RoundingMethod | str | None = None,
) -> DraftSnapshot:
    """Fresh line items and totals for ``draft``."""
    items = [line_items.recompute(item) for item in draft.items]
    totals = safe_aggregate_complete(
        items,
        draft.charges,
        draft.invoice_discount_percent,
        round_off_method,
    )
    return DraftSnapshot(items=items, totals=totals)


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def validate_for_submission(
    draft: InvoiceDraft,
    stock_lookup: StockLookup | None = None,
) -> list[SubmissionIssue]:
    """Reasons the draft cannot be submitted; empty when it is good to go.

    Stock was clamped at edit time, but it may have moved since.  When a
    ``stock_lookup`` is given, quantities are checked against the fresh
    figure it returns; products it does not know (None) fall back to the
    stock captured on the line.
    """
    issues: list[SubmissionIssue] = []
    if not draft.items:
        issues.append(SubmissionIssue(code="empty_draft", message="Please add at least one product"))
        return issues

    for i, item in enumerate(draft.items):
        label = item.product_name or item.product_id or f"item {i + 1}"

        if item.quantity_sold <= 0:
            issues.append(SubmissionIssue(
                code="invalid_quantity",
                message=f"Quantity must be greater than zero for {label}",
                index=i,
                product_id=item.product_id,
            ))

        stock = item.available_stock
        if stock_lookup is not None and item.product_id is not None:
            fresh = stock_lookup(item.product_id)
            if fresh is not None:
                stock = fresh

        needed = item.quantity_sold + item.free_quantity
        if stock is not None and needed > stock:
            issues.append(SubmissionIssue(
                code="insufficient_stock",
                message=f"Insufficient stock for {label}. Available: {stock:g}, Required: {needed:g}",
                index=i,
                product_id=item.product_id,
            ))

    if issues:
        logger.info("Draft failed submission checks: %s", [issue.code for issue in issues])
    return issues


def to_submission_payload(draft: InvoiceDraft) -> dict[str, Any]:
    """Inputs only; derived amounts are recomputed by whoever stores them."""
    return {
        "items": [item.to_submission() for item in draft.items],
        "invoice_discount_percent": draft.invoice_discount_percent,
        "charges": {
            "shipping": draft.charges.shipping,
            "handling": draft.charges.handling,
            "other": draft.charges.other,
            "gst_on_charges": draft.charges.gst_on_charges,
            "gst_percent": draft.charges.gst_percent,
        },
    }


def rebuild_from_payload(
    payload: dict[str, Any],
    round_off_method: RoundingMethod | str | None = None,
) -> DraftSnapshot:
    """Read path for a stored invoice: regenerate every derived figure."""
    items = [
        LineItem(
            product_id=raw.get("product_id"),
            product_name=raw.get("product_name", ""),
            quantity_sold=coerce_number(raw.get("quantity_sold")),
            free_quantity=coerce_number(raw.get("free_quantity")),
            base_rate=coerce_number(raw.get("base_rate")),
            tax_rate_percent=coerce_number(raw.get("tax_rate_percent")),
            scheme_discount_percent=coerce_number(raw.get("scheme_discount_percent")),
        )
        for raw in payload.get("items", [])
    ]
    raw_charges = payload.get("charges") or {}
    draft = InvoiceDraft(
        items=items,
        invoice_discount_percent=coerce_number(payload.get("invoice_discount_percent")),
        charges=Charges(
            shipping=coerce_number(raw_charges.get("shipping")),
            handling=coerce_number(raw_charges.get("handling")),
            other=coerce_number(raw_charges.get("other")),
            gst_on_charges=bool(raw_charges.get("gst_on_charges", False)),
            gst_percent=coerce_number(raw_charges.get("gst_percent")),
        ),
    )
    return recompute(draft, round_off_method)
