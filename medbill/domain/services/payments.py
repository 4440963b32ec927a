# medbill/domain/services/payments.py
"""
Payment arithmetic for cash and credit invoices: change due, split
tenders across payment methods, and simple-interest instalment plans.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

from medbill.domain.services.rounding import round_value

PAYMENT_METHODS = ("cash", "card", "upi", "netbanking", "cheque", "credit")


@dataclass
class ChangeDue:
    total: float = 0
    paid: float = 0
    change: float = 0
    is_exact: bool = False
    is_overpaid: bool = False
    is_underpaid: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TenderShare:
    method: str
    amount: float
    percent: float


@dataclass
class PaymentSplit:
    total: float = 0
    tenders: list[TenderShare] = field(default_factory=list)
    total_paid: float = 0
    remaining: float = 0
    is_paid: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class InstallmentPlan:
    principal: float = 0
    installments: int = 0
    interest_percent: float = 0
    total_interest: float = 0
    total_with_interest: float = 0
    installment_amount: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_change(total: float, paid: float) -> ChangeDue:
    change = round_value(paid - total)
    return ChangeDue(
        total=round_value(total),
        paid=round_value(paid),
        change=change,
        is_exact=change == 0,
        is_overpaid=change > 0,
        is_underpaid=change < 0,
    )


def split_payment(total: float, payments: Iterable[dict[str, Any]]) -> PaymentSplit:
    """Spread ``total`` over ``payments`` (dicts with ``method`` and ``amount``)."""
    tenders = []
    paid = 0.0
    for p in payments:
        amount = float(p.get("amount") or 0)
        paid += amount
        tenders.append(TenderShare(
            method=p.get("method", "cash"),
            amount=round_value(amount),
            percent=round_value(amount / total * 100) if total else 0,
        ))

    remaining = round_value(total - paid)
    return PaymentSplit(
        total=round_value(total),
        tenders=tenders,
        total_paid=round_value(paid),
        remaining=remaining,
        is_paid=remaining <= 0,
    )


def calculate_installments(
    total: float,
    installments: int,
    annual_interest_percent: float = 0,
) -> InstallmentPlan:
    """Equal instalments, one per month, with simple annual interest."""
    if installments <= 0:
        raise ValueError(f"Number of installments must be positive, got {installments}")

    with_interest = total
    if annual_interest_percent > 0:
        interest = total * annual_interest_percent * installments / (12 * 100)
        with_interest = total + interest

    return InstallmentPlan(
        principal=round_value(total),
        installments=installments,
        interest_percent=round_value(annual_interest_percent),
        total_interest=round_value(with_interest - total),
        total_with_interest=round_value(with_interest),
        installment_amount=round_value(with_interest / installments),
    )
