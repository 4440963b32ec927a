# medbill/domain/services/amount_words.py
"""
Amount-in-words and currency display for printed invoices.

Uses Indian grouping: crore (10^7), lakh (10^5), thousand, hundred.
    150075.50 → "One Lakh Fifty Thousand Seventy Five Rupees and Fifty Paise Only"
"""

from __future__ import annotations

import math
import re

from medbill.core.config import settings
from medbill.domain.services.rounding import round_value

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (size, label), largest first
_GROUPS = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
    (100, "Hundred"),
]


def _words(n: int) -> str:
    if n == 0:
        return ""
    if n < 20:
        return _ONES[n]
    if n < 100:
        tens, ones = divmod(n, 10)
        return _TENS[tens] + (" " + _ONES[ones] if ones else "")

    for size, label in _GROUPS:
        if n >= size:
            head, rest = divmod(n, size)
            # crores above 99 recurse: "One Hundred Twenty Crore"
            text = f"{_words(head)} {label}"
            return text + (" " + _words(rest) if rest else "")
    return ""


def number_to_words(n: int) -> str:
    """Whole number in words, Indian grouping.  ``0`` is "Zero"."""
    n = int(n)
    if n == 0:
        return "Zero"
    if n < 0:
        return "Minus " + _words(-n)
    return _words(n)


def amount_to_words(amount: float) -> str:
    """Rupees and paise in words, e.g. "Ten Rupees and Five Paise Only"."""
    prefix = ""
    if amount < 0:
        prefix = "Minus "
        amount = -amount

    total_paise = math.floor(round_value(amount) * 100 + 0.5)
    rupees, paise = divmod(total_paise, 100)

    text = number_to_words(rupees) + " Rupees"
    if paise:
        text += " and " + number_to_words(paise) + " Paise"
    return prefix + text + " Only"


# ---------------------------------------------------------------------------
# Currency display
# ---------------------------------------------------------------------------

def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_currency(amount: float, symbol: bool = True) -> str:
    """``150075.5`` → ``"₹1,50,075.50"`` (Indian digit grouping)."""
    value = round_value(amount)
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    prefix = settings.CURRENCY_SYMBOL if symbol else ""
    return f"{sign}{prefix}{_group_indian(whole)}.{frac}"


_CURRENCY_NOISE = re.compile(r"[₹,\s]")


def parse_currency(text: str) -> float:
    """``"₹1,50,075.50"`` → ``150075.5``; unparseable text is 0."""
    cleaned = _CURRENCY_NOISE.sub("", text or "")
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0
