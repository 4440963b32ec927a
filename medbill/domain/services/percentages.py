# medbill/domain/services/percentages.py
"""
Percentage and discount primitives.

Cascading discounts are multiplicative: each percentage applies to the
amount left after the previous one, so 10% + 10% on 1000 is 190 off, not
200.  Flat discounts are clamped to the amount being discounted.

Profit helpers keep markup (profit as a share of cost) apart from margin
(profit as a share of selling price).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from medbill.domain.services.rounding import round_value


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class DiscountResult:
    original_amount: float = 0
    discount_percent: float = 0
    discount_amount: float = 0
    final_amount: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CascadeStep:
    step: int
    discount_percent: float
    discount_amount: float
    amount_after_discount: float


@dataclass
class CascadeResult:
    original_amount: float = 0
    total_discount: float = 0
    final_amount: float = 0
    effective_percent: float = 0
    steps: list[CascadeStep] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Percentages
# ---------------------------------------------------------------------------

def percentage_of(value: float, pct: float) -> float:
    """``pct`` percent of ``value``, rounded to the paisa."""
    return round_value(value * pct / 100)


def add_percentage(value: float, pct: float) -> float:
    return round_value(value + percentage_of(value, pct))


def subtract_percentage(value: float, pct: float) -> float:
    return round_value(value - percentage_of(value, pct))


def percentage_delta(old: float, new: float) -> float:
    """Signed change from ``old`` to ``new`` in percent (negative = decrease)."""
    if old == 0:
        return 0
    return round_value((new - old) / old * 100)


def percentage_increase(old: float, new: float) -> float:
    return percentage_delta(old, new)


def percentage_decrease(old: float, new: float) -> float:
    if old == 0:
        return 0
    return round_value((old - new) / old * 100)


def share_of(part: float, whole: float) -> float:
    """What percent ``part`` is of ``whole``."""
    if whole == 0:
        return 0
    return round_value(part / whole * 100)


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------

def apply_single_discount(amount: float, pct: float) -> DiscountResult:
    discount = percentage_of(amount, pct)
    return DiscountResult(
        original_amount=round_value(amount),
        discount_percent=pct,
        discount_amount=discount,
        final_amount=round_value(amount - discount),
    )


def apply_cascading_discounts(amount: float, pcts: list[float]) -> CascadeResult:
    """Apply ``pcts`` one after another to the running discounted amount."""
    current = amount
    total_discount = 0.0
    steps: list[CascadeStep] = []

    for i, pct in enumerate(pcts, start=1):
        discount = percentage_of(current, pct)
        total_discount += discount
        current -= discount
        steps.append(CascadeStep(
            step=i,
            discount_percent=pct,
            discount_amount=round_value(discount),
            amount_after_discount=round_value(current),
        ))

    effective = (amount - current) / amount * 100 if amount else 0
    return CascadeResult(
        original_amount=round_value(amount),
        total_discount=round_value(total_discount),
        final_amount=round_value(current),
        effective_percent=round_value(effective),
        steps=steps,
    )


def apply_flat_discount(amount: float, flat_amount: float) -> DiscountResult:
    """Fixed-amount discount; never takes the amount below zero."""
    discount = min(max(flat_amount, 0), max(amount, 0))
    effective = discount / amount * 100 if amount > 0 else 0
    return DiscountResult(
        original_amount=round_value(amount),
        discount_percent=round_value(effective),
        discount_amount=round_value(discount),
        final_amount=round_value(max(0, amount - discount)),
    )


# ---------------------------------------------------------------------------
# Profit and pricing
# ---------------------------------------------------------------------------

@dataclass
class ProfitBreakdown:
    selling_price: float = 0
    cost_price: float = 0
    profit: float = 0
    profit_percent: float = 0       # on cost
    profit_margin: float = 0        # on selling price

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MarkupResult:
    cost_price: float = 0
    markup_percent: float = 0
    markup_amount: float = 0
    selling_price: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_profit(selling_price: float, cost_price: float) -> ProfitBreakdown:
    """Profit, markup-on-cost and margin-on-price.  Zero cost or price gives 0%."""
    profit = selling_price - cost_price
    return ProfitBreakdown(
        selling_price=round_value(selling_price),
        cost_price=round_value(cost_price),
        profit=round_value(profit),
        profit_percent=round_value(profit / cost_price * 100) if cost_price > 0 else 0,
        profit_margin=round_value(profit / selling_price * 100) if selling_price > 0 else 0,
    )


def selling_price_from_margin(cost_price: float, margin_percent: float) -> float:
    """Price at which ``margin_percent`` of the price is profit.

    A margin of 100% or more has no price; 0 is returned.
    """
    if margin_percent >= 100:
        return 0.0
    return round_value(cost_price / (1 - margin_percent / 100))


def cost_price_from_margin(selling_price: float, margin_percent: float) -> float:
    return round_value(selling_price * (1 - margin_percent / 100))


def apply_markup(cost_price: float, markup_percent: float) -> MarkupResult:
    markup = cost_price * markup_percent / 100
    return MarkupResult(
        cost_price=round_value(cost_price),
        markup_percent=round_value(markup_percent),
        markup_amount=round_value(markup),
        selling_price=round_value(cost_price + markup),
    )
