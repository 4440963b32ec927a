# medbill/domain/services/invoice_totals.py
"""
Invoice aggregator.

Totals are a projection of the current line items plus the invoice-level
parameters (invoice discount, surcharges).  They are rebuilt from scratch
on every change and never patched incrementally, so the stored total can
not drift from the sum of its parts.

    grand_total = Σ line totals + charges + GST on charges − invoice discount
    payable     = grand_total rounded per ROUND_OFF_METHOD
    round_off   = payable − grand_total

The invoice discount is taken on the taxable subtotal, separately from the
per-line scheme discounts (the two do not cascade).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from medbill.core.config import settings
from medbill.domain.models.invoice import Charges, InvoiceTotals, ItemTotals
from medbill.domain.services.gst_split import split_tax
from medbill.domain.services.percentages import percentage_of
from medbill.domain.services.rounding import RoundingMethod, apply_policy, round_value

logger = logging.getLogger("invoice_totals")

_SUM_FIELDS = (
    ("base_amount", "base_amount"),
    ("total_discount", "discount_amount"),
    ("total_taxable", "taxable_amount"),
    ("total_gst", "tax_amount"),
    ("total_cgst", "cgst_amount"),
    ("total_sgst", "sgst_amount"),
    ("total_igst", "igst_amount"),
    ("net_total", "total_amount"),
)


def _field(item: Any, name: str) -> float:
    value = item[name] if isinstance(item, dict) else getattr(item, name)
    if value is None:
        return 0.0
    return float(value)


def aggregate(items: Iterable[Any]) -> ItemTotals:
    """Sum every derived line field across ``items``.

    Accepts LineItem objects or dicts with the same keys.  A missing field
    raises (AttributeError/KeyError); use ``safe_aggregate_complete`` where
    a degraded result is preferable.
    """
    sums = {total: 0.0 for total, _ in _SUM_FIELDS}
    count = 0
    for item in items:
        for total, source in _SUM_FIELDS:
            sums[total] += _field(item, source)
        count += 1

    return ItemTotals(
        **{name: round_value(value) for name, value in sums.items()},
        item_count=count,
    )


def aggregate_complete(
    items: Iterable[Any],
    charges: Charges | None = None,
    invoice_discount_percent: float = 0,
    round_off_method: RoundingMethod | str | None = None,
) -> InvoiceTotals:
    """Full invoice totals including invoice discount, charges and round-off."""
    charges = charges or Charges()
    method = round_off_method or settings.ROUND_OFF_METHOD
    subtotal = aggregate(items)

    invoice_discount = percentage_of(subtotal.total_taxable, invoice_discount_percent)
    net_taxable = subtotal.total_taxable - invoice_discount

    total_charges = charges.total
    charges_gst = 0.0
    if charges.gst_on_charges:
        charges_gst = split_tax(total_charges, charges.gst_percent).tax_amount

    grand_total = round_value(subtotal.net_total + total_charges + charges_gst - invoice_discount)
    payable = apply_policy(grand_total, method)
    round_off = round_value(payable - grand_total)

    return InvoiceTotals(
        base_amount=subtotal.base_amount,
        total_discount=subtotal.total_discount,
        total_taxable=subtotal.total_taxable,
        total_gst=subtotal.total_gst,
        total_cgst=subtotal.total_cgst,
        total_sgst=subtotal.total_sgst,
        total_igst=subtotal.total_igst,
        net_total=subtotal.net_total,
        item_count=subtotal.item_count,
        invoice_discount_percent=round_value(invoice_discount_percent),
        invoice_discount_amount=round_value(invoice_discount),
        net_taxable=round_value(net_taxable),
        shipping_charges=round_value(charges.shipping),
        handling_charges=round_value(charges.handling),
        other_charges=round_value(charges.other),
        total_charges=round_value(total_charges),
        charges_gst=round_value(charges_gst),
        grand_total=grand_total,
        round_off=round_off,
        payable_amount=payable,
    )


def safe_aggregate_complete(
    items: Iterable[Any],
    charges: Charges | None = None,
    invoice_discount_percent: float = 0,
    round_off_method: RoundingMethod | str | None = None,
) -> InvoiceTotals:
    """Like ``aggregate_complete`` but degrades to all-zero, unavailable totals."""
    try:
        return aggregate_complete(items, charges, invoice_discount_percent, round_off_method)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Invoice totals unavailable: %s", e)
        return InvoiceTotals.unavailable()
