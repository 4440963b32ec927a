# medbill/domain/errors.py
"""Exceptions raised by the billing domain.

Numeric problems never raise: bad input is coerced, unsafe divisions keep
the previous value and out-of-range edits are clamped.  These exceptions
cover structural misuse of a draft (unknown line, unknown field, a product
added twice).
"""

from __future__ import annotations


class BillingError(ValueError):
    """Base class for draft/line-item misuse."""


class DuplicateProductError(BillingError):
    def __init__(self, product_id: str, product_name: str = ""):
        self.product_id = product_id
        label = product_name or product_id
        super().__init__(f"Product already added to invoice: {label}")


class LineItemIndexError(BillingError, IndexError):
    def __init__(self, index: int, size: int):
        self.index = index
        super().__init__(f"No line item at position {index} (draft has {size})")


class UnknownFieldError(BillingError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field is not editable: {field_name}")
