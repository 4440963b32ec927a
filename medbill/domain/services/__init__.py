# medbill/domain/services/__init__.py
"""Billing engine: rounding, discounts, GST split, line items, totals and words."""

from medbill.domain.services.amount_words import amount_to_words, format_currency, number_to_words
from medbill.domain.services.gst_split import split_tax
from medbill.domain.services.invoice_draft import recompute
from medbill.domain.services.invoice_totals import aggregate, aggregate_complete
from medbill.domain.services.line_items import compute_line_item, edit_line_item
from medbill.domain.services.percentages import (
    apply_cascading_discounts,
    apply_flat_discount,
    apply_single_discount,
)
from medbill.domain.services.rounding import RoundingMethod, apply_policy, round_value

__all__ = [
    "RoundingMethod",
    "aggregate",
    "aggregate_complete",
    "amount_to_words",
    "apply_cascading_discounts",
    "apply_flat_discount",
    "apply_policy",
    "apply_single_discount",
    "compute_line_item",
    "edit_line_item",
    "format_currency",
    "number_to_words",
    "recompute",
    "round_value",
    "split_tax",
]
