# medbill/domain/services/gst_split.py
"""
GST split calculator.

One tax amount is exposed three ways.  An intra-state sale prints CGST +
SGST (half each), an inter-state sale prints IGST (the whole amount).  The
engine always computes all three and leaves the choice to whoever renders
the invoice.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable

from medbill.core.config import settings
from medbill.domain.services.rounding import round_value

logger = logging.getLogger("gst_split")


@dataclass
class TaxSplit:
    tax_amount: float = 0
    cgst: float = 0
    sgst: float = 0
    igst: float = 0
    rate_percent: float = 0

    def for_supply(self, inter_state: bool) -> dict[str, float]:
        """Components to print for the given supply type."""
        if inter_state:
            return {"igst": self.igst}
        return {"cgst": self.cgst, "sgst": self.sgst}

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class InclusiveSplit(TaxSplit):
    taxable_amount: float = 0


@dataclass
class RateBucket:
    """Rate-wise GST summary row (one per slab used on the invoice)."""
    rate_percent: float
    taxable_amount: float = 0
    cgst: float = 0
    sgst: float = 0
    igst: float = 0
    total_tax: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _halves(tax_amount: float) -> tuple[float, float]:
    cgst = round_value(tax_amount / 2)
    # SGST takes the remainder so the halves always add back to the tax
    sgst = round_value(tax_amount - cgst)
    return cgst, sgst


def split_tax(taxable_amount: float, rate_percent: float) -> TaxSplit:
    tax = round_value(taxable_amount * rate_percent / 100)
    cgst, sgst = _halves(tax)
    return TaxSplit(tax_amount=tax, cgst=cgst, sgst=sgst, igst=tax, rate_percent=rate_percent)


def split_inclusive_tax(total_amount: float, rate_percent: float) -> InclusiveSplit:
    """Back the tax out of a tax-inclusive amount."""
    taxable = total_amount / (1 + rate_percent / 100)
    tax = round_value(total_amount - taxable)
    cgst, sgst = _halves(tax)
    return InclusiveSplit(
        tax_amount=tax,
        cgst=cgst,
        sgst=sgst,
        igst=tax,
        rate_percent=rate_percent,
        taxable_amount=round_value(taxable),
    )


def add_gst(amount: float, rate_percent: float) -> float:
    return round_value(amount * (1 + rate_percent / 100))


def remove_gst(amount: float, rate_percent: float) -> float:
    return round_value(amount / (1 + rate_percent / 100))


def is_valid_gst_rate(rate: Any, rates: Iterable[float] | None = None) -> bool:
    """True if ``rate`` is one of the configured GST slabs."""
    allowed = list(rates) if rates is not None else settings.GST_RATES
    try:
        value = float(rate)
    except (TypeError, ValueError):
        return False
    return value in {float(r) for r in allowed}


def gst_breakdown_by_rate(items: Iterable[Any]) -> list[RateBucket]:
    """Group taxable amounts by GST rate, sorted by rate.

    ``items`` may be LineItem objects or dicts carrying ``tax_rate_percent``
    and ``taxable_amount``.  Missing values count as zero.
    """
    buckets: dict[float, RateBucket] = {}

    for item in items:
        if isinstance(item, dict):
            rate = item.get("tax_rate_percent") or 0
            taxable = item.get("taxable_amount") or 0
        else:
            rate = getattr(item, "tax_rate_percent", 0) or 0
            taxable = getattr(item, "taxable_amount", 0) or 0

        rate = float(rate)
        bucket = buckets.setdefault(rate, RateBucket(rate_percent=rate))
        split = split_tax(taxable, rate)
        bucket.taxable_amount += taxable
        bucket.cgst += split.cgst
        bucket.sgst += split.sgst
        bucket.igst += split.igst
        bucket.total_tax += split.tax_amount

    result = []
    for rate in sorted(buckets):
        b = buckets[rate]
        result.append(RateBucket(
            rate_percent=rate,
            taxable_amount=round_value(b.taxable_amount),
            cgst=round_value(b.cgst),
            sgst=round_value(b.sgst),
            igst=round_value(b.igst),
            total_tax=round_value(b.total_tax),
        ))

    logger.debug("GST breakdown built for %d rate slab(s)", len(result))
    return result
