# medbill/domain/services/line_items.py
"""
Line-item calculator.

Forward mode turns (quantity, base rate, tax rate, scheme discount) into
every derived amount on the line:

    base_amount    = quantity × base_rate
    discount       = base_amount × discount% / 100
    taxable        = base_amount − discount
    tax            = taxable × tax% / 100       (split CGST/SGST/IGST)
    total          = taxable + tax
    net_rate       = base_rate × (1 + tax% / 100)

Each figure is rounded to the paisa where it is derived, so taxable + tax
always equals total and CGST + SGST always equals tax.

Inverse mode handles a user typing into a derived field (total, net rate,
base amount): base_rate is solved for with quantity, tax and discount held
fixed, forward mode regenerates the line, and the typed value is written
back as entered so the screen does not "correct" what the user just typed.
A typed value is only kept while it is within a paisa of what the solved
rate produces; when no rate can produce it (100% discount, negative
quantity) the edit is a no-op.

base_rate is the only monetary source of truth on a line.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any

from medbill.domain.errors import UnknownFieldError
from medbill.domain.models.invoice import (
    INVERSE_FIELDS,
    CatalogProduct,
    EditableField,
    LineAmounts,
    LineItem,
)
from medbill.domain.services.gst_split import split_tax
from medbill.domain.services.percentages import apply_flat_discount
from medbill.domain.services.rounding import clamp, round_value

logger = logging.getLogger("line_items")

QUANTITY_DECIMALS = 3
# Solved rates keep extra precision so quantity × rate lands on the typed paisa
RATE_DECIMALS = 6
RECONCILE_TOLERANCE = 0.01


# ---------------------------------------------------------------------------
# Input coercion
# ---------------------------------------------------------------------------

def coerce_number(value: Any) -> float:
    """Parse user input to a finite float; anything else becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


# ---------------------------------------------------------------------------
# Forward mode
# ---------------------------------------------------------------------------

def compute_line_item(
    quantity: float,
    base_rate: float,
    tax_rate_percent: float,
    discount_percent: float = 0,
) -> LineAmounts:
    """Derive every amount on a line from its inputs."""
    base_amount = round_value(quantity * base_rate)
    discount_amount = round_value(base_amount * discount_percent / 100)
    return _finish(
        quantity,
        base_rate,
        tax_rate_percent,
        discount_percent,
        base_amount,
        discount_amount,
    )


def compute_line_item_flat(
    quantity: float,
    base_rate: float,
    tax_rate_percent: float,
    flat_discount: float = 0,
) -> LineAmounts:
    """Forward mode with a fixed-amount discount instead of a percentage.

    The discount is clamped to the base amount; the effective percentage is
    reported in ``discount_percent``.
    """
    base_amount = round_value(quantity * base_rate)
    flat = apply_flat_discount(base_amount, flat_discount)
    return _finish(
        quantity,
        base_rate,
        tax_rate_percent,
        flat.discount_percent,
        base_amount,
        flat.discount_amount,
    )


def _finish(
    quantity: float,
    base_rate: float,
    tax_rate_percent: float,
    discount_percent: float,
    base_amount: float,
    discount_amount: float,
) -> LineAmounts:
    taxable_amount = round_value(base_amount - discount_amount)
    split = split_tax(taxable_amount, tax_rate_percent)
    return LineAmounts(
        quantity=round_value(quantity, QUANTITY_DECIMALS),
        base_rate=round_value(base_rate),
        tax_rate_percent=round_value(tax_rate_percent),
        discount_percent=round_value(discount_percent),
        base_amount=base_amount,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=split.tax_amount,
        cgst_amount=split.cgst,
        sgst_amount=split.sgst,
        igst_amount=split.igst,
        net_rate=round_value(base_rate * (1 + tax_rate_percent / 100)),
        total_amount=round_value(taxable_amount + split.tax_amount),
    )


def recompute(item: LineItem) -> LineItem:
    """Return a copy of ``item`` with all derived fields regenerated.

    A pinned field (the derived figure the user typed last) keeps its
    entered value as long as it is within a paisa of the figure the inputs
    produce.  A pin further off than that is dropped and the computed
    figure is used, so a line always reconciles.
    """
    amounts = compute_line_item(
        item.quantity_sold,
        item.base_rate,
        item.tax_rate_percent,
        item.scheme_discount_percent,
    )
    fresh = replace(
        item,
        base_amount=amounts.base_amount,
        discount_amount=amounts.discount_amount,
        taxable_amount=amounts.taxable_amount,
        tax_amount=amounts.tax_amount,
        cgst_amount=amounts.cgst_amount,
        sgst_amount=amounts.sgst_amount,
        igst_amount=amounts.igst_amount,
        net_rate=amounts.net_rate,
        total_amount=amounts.total_amount,
    )
    if item.pinned_field in {f.value for f in INVERSE_FIELDS}:
        entered = coerce_number(getattr(item, item.pinned_field))
        computed = getattr(fresh, item.pinned_field)
        if reconciles(entered, computed):
            fresh = replace(fresh, **{item.pinned_field: entered})
        else:
            logger.debug(
                "Dropping pinned %s=%s; inputs give %s",
                item.pinned_field, entered, computed,
            )
            fresh = replace(fresh, pinned_field=None)
    return fresh


def reconciles(a: float, b: float) -> bool:
    """True when two money figures agree to within RECONCILE_TOLERANCE."""
    # compare at paisa resolution so 0.01000000000002 still counts as a paisa
    return round_value(abs(a - b)) <= RECONCILE_TOLERANCE


# ---------------------------------------------------------------------------
# Inverse mode
# ---------------------------------------------------------------------------

def _divisor_quantity(quantity: float) -> float:
    # zero quantity divides as 1; negative stays negative and is rejected by the caller
    return quantity or 1


def _rate_for_total(
    total_amount: float,
    quantity: float,
    tax_rate_percent: float,
    discount_percent: float,
) -> float | None:
    qty = _divisor_quantity(quantity)
    discount_multiplier = (100 - discount_percent) / 100
    tax_multiplier = (100 + tax_rate_percent) / 100
    if qty <= 0 or discount_multiplier <= 0 or tax_multiplier <= 0:
        return None
    rate = round_value(total_amount / (qty * discount_multiplier * tax_multiplier), RATE_DECIMALS)
    return _closest_paisa_rate(rate, total_amount, qty, tax_rate_percent, discount_percent)


def _closest_paisa_rate(
    rate: float,
    total_amount: float,
    quantity: float,
    tax_rate_percent: float,
    discount_percent: float,
) -> float:
    """Nudge ``rate`` so the forward total lands as close to ``total_amount`` as it can.

    Tax is rounded on the rounded base amount, so the plain quotient can
    miss the typed total by a paisa or so.  Base amounts up to two paise
    either side are tried; one of them always lands within a paisa.
    """
    def gap(candidate: float) -> float:
        forward = compute_line_item(quantity, candidate, tax_rate_percent, discount_percent)
        return abs(forward.total_amount - total_amount)

    best, best_gap = rate, gap(rate)
    base_amount = round_value(quantity * rate)
    for paise in (-2, -1, 1, 2):
        if best_gap < 0.005:
            break
        shifted = base_amount + paise / 100
        if shifted < 0:
            continue
        candidate = round_value(shifted / quantity, RATE_DECIMALS)
        candidate_gap = gap(candidate)
        if candidate_gap < best_gap:
            best, best_gap = candidate, candidate_gap
    return best


def _rate_for_net_rate(net_rate: float, tax_rate_percent: float) -> float | None:
    tax_multiplier = (100 + tax_rate_percent) / 100
    if tax_multiplier <= 0:
        return None
    return round_value(net_rate / tax_multiplier, RATE_DECIMALS)


def _rate_for_base_amount(base_amount: float, quantity: float) -> float | None:
    qty = _divisor_quantity(quantity)
    if qty <= 0:
        return None
    return round_value(base_amount / qty, RATE_DECIMALS)


def solve_rate_from_total(
    total_amount: float,
    quantity: float,
    tax_rate_percent: float,
    discount_percent: float,
    previous_rate: float,
) -> float:
    """base_rate such that the line total comes to ``total_amount``."""
    rate = _rate_for_total(total_amount, quantity, tax_rate_percent, discount_percent)
    if rate is None:
        logger.debug(
            "Cannot solve rate from total %.2f (qty=%s, discount=%s%%); keeping %s",
            total_amount, quantity, discount_percent, previous_rate,
        )
        return previous_rate
    return rate


def solve_rate_from_net_rate(
    net_rate: float,
    tax_rate_percent: float,
    previous_rate: float,
) -> float:
    """base_rate whose tax-inclusive unit price is ``net_rate``."""
    rate = _rate_for_net_rate(net_rate, tax_rate_percent)
    if rate is None:
        logger.debug("Cannot solve rate from net rate at tax %s%%; keeping %s", tax_rate_percent, previous_rate)
        return previous_rate
    return rate


def solve_rate_from_base_amount(
    base_amount: float,
    quantity: float,
    previous_rate: float,
) -> float:
    rate = _rate_for_base_amount(base_amount, quantity)
    if rate is None:
        logger.debug("Cannot solve rate from base amount with qty=%s; keeping %s", quantity, previous_rate)
        return previous_rate
    return rate


def _solve_rate(item: LineItem, field: EditableField, value: float) -> float | None:
    """Solved base_rate for a derived-field edit, or None when there is none."""
    if field == EditableField.TOTAL_AMOUNT:
        return _rate_for_total(
            value,
            item.quantity_sold,
            item.tax_rate_percent,
            item.scheme_discount_percent,
        )
    if field == EditableField.NET_RATE:
        return _rate_for_net_rate(value, item.tax_rate_percent)
    return _rate_for_base_amount(value, item.quantity_sold)


# ---------------------------------------------------------------------------
# Seeding and editing
# ---------------------------------------------------------------------------

def seed_line_item(product: CatalogProduct) -> LineItem:
    """New line for ``product``: one unit, no discount, rate net of GST."""
    tax = product.tax_rate_percent or 0
    base_rate = round_value(product.list_price / (1 + tax / 100), RATE_DECIMALS)
    item = LineItem(
        quantity_sold=1,
        free_quantity=0,
        base_rate=base_rate,
        tax_rate_percent=tax,
        scheme_discount_percent=0,
        product_id=product.product_id,
        product_name=product.name,
        available_stock=product.current_stock,
    )
    return recompute(item)


def clamp_quantity(value: float, other_quantity: float, stock: float | None) -> float:
    """Clamp an edited quantity so it plus ``other_quantity`` fits in stock."""
    value = max(0.0, value)
    if stock is None:
        return value
    return min(value, max(0.0, stock - other_quantity))


def _as_field(field: EditableField | str) -> EditableField:
    try:
        return EditableField(field)
    except ValueError:
        raise UnknownFieldError(str(field)) from None


def edit_line_item(item: LineItem, field: EditableField | str, value: Any) -> LineItem:
    """Apply one user edit and return the fully recomputed line."""
    field = _as_field(field)
    # all editable fields are non-negative
    number = max(0.0, coerce_number(value))

    if field == EditableField.QUANTITY_SOLD:
        qty = clamp_quantity(number, item.free_quantity, item.available_stock)
        if qty != number:
            logger.debug("Quantity %s clamped to %s (stock=%s)", number, qty, item.available_stock)
        return recompute(replace(item, quantity_sold=round_value(qty, QUANTITY_DECIMALS), pinned_field=None))

    if field == EditableField.FREE_QUANTITY:
        free = clamp_quantity(number, item.quantity_sold, item.available_stock)
        if free != number:
            logger.debug("Free quantity %s clamped to %s (stock=%s)", number, free, item.available_stock)
        return recompute(replace(item, free_quantity=round_value(free, QUANTITY_DECIMALS), pinned_field=None))

    if field == EditableField.BASE_RATE:
        return recompute(replace(item, base_rate=number, pinned_field=None))

    if field == EditableField.SCHEME_DISCOUNT_PERCENT:
        return recompute(replace(item, scheme_discount_percent=clamp(number, 0, 100), pinned_field=None))

    # Derived field typed directly: back-solve base_rate, keep the typed figure
    base_rate = _solve_rate(item, field, number)
    if base_rate is None:
        logger.debug(
            "No base rate gives %s=%s (qty=%s, discount=%s%%); line left as is",
            field.value, number, item.quantity_sold, item.scheme_discount_percent,
        )
        return recompute(replace(item, pinned_field=None))
    return recompute(replace(item, base_rate=base_rate, pinned_field=field.value, **{field.value: number}))
