# medbill/api/v1/routes/billing.py
"""
Billing calculation endpoints used by the invoice editor.

Stateless: the client sends the draft (inputs only, plus the field the user
last typed into) and gets back fully recomputed lines and totals.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from medbill.core.config import settings
from medbill.domain.services import invoice_draft
from medbill.domain.services.amount_words import amount_to_words, format_currency
from medbill.domain.services.gst_split import gst_breakdown_by_rate
from medbill.domain.services.line_items import (
    compute_line_item,
    compute_line_item_flat,
    edit_line_item,
)
from medbill.domain.services.percentages import apply_cascading_discounts

from medbill.api.v1.envelope import ok
from medbill.api.v1.schemas.billing import (
    AmountInWordsRequest,
    CascadeRequest,
    ComputeLineRequest,
    DraftRequest,
    EditLineRequest,
    ValidateDraftRequest,
)

logger = logging.getLogger("api.v1.billing")

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.get("/gst-rates", response_model=dict)
async def gst_rates():
    """GST slabs accepted by the catalog."""
    return ok({"rates": settings.GST_RATES})


@router.post("/line-items/compute", response_model=dict)
async def compute_line(body: ComputeLineRequest):
    """Forward calculation: inputs → every derived amount on the line."""
    if body.flat_discount is not None:
        amounts = compute_line_item_flat(
            body.quantity, body.base_rate, body.tax_rate_percent, body.flat_discount,
        )
    else:
        amounts = compute_line_item(
            body.quantity, body.base_rate, body.tax_rate_percent, body.discount_percent,
        )
    return ok(amounts.to_dict())


@router.post("/line-items/edit", response_model=dict)
async def edit_line(body: EditLineRequest):
    """Apply one field edit; derived-field edits back-solve the base rate."""
    item = edit_line_item(body.item.to_domain(), body.field, body.value)
    return ok(item.to_dict())


@router.post("/drafts/recompute", response_model=dict)
async def recompute_draft(body: DraftRequest):
    """Recompute every line and the invoice totals for a draft."""
    snapshot = invoice_draft.recompute(body.to_domain(), body.round_off_method)
    logger.debug("Recomputed draft with %d line(s)", len(snapshot.items))
    data = snapshot.to_dict()
    data["gst_breakdown"] = [b.to_dict() for b in gst_breakdown_by_rate(snapshot.items)]

    totals = snapshot.totals
    if body.include_words and totals.available:
        data["amount_in_words"] = amount_to_words(totals.payable_amount)
        data["payable_display"] = format_currency(totals.payable_amount)

    message = None if totals.available else "Totals unavailable"
    return ok(data, message=message)


@router.post("/drafts/validate", response_model=dict)
async def validate_draft(body: ValidateDraftRequest):
    """Submission checks, using fresh stock figures when supplied."""
    stock_lookup = body.current_stock.get if body.current_stock is not None else None
    issues = invoice_draft.validate_for_submission(body.to_domain(), stock_lookup)
    return ok({
        "valid": not issues,
        "issues": [issue.to_dict() for issue in issues],
        "payload": invoice_draft.to_submission_payload(body.to_domain()) if not issues else None,
    })


@router.post("/discounts/cascade", response_model=dict)
async def cascade_discounts(body: CascadeRequest):
    """Sequential (multiplicative) discount breakdown."""
    return ok(apply_cascading_discounts(body.amount, body.discounts).to_dict())


@router.post("/amount-in-words", response_model=dict)
async def words(body: AmountInWordsRequest):
    return ok({
        "amount": body.amount,
        "words": amount_to_words(body.amount),
        "display": format_currency(body.amount),
    })
