"""
Exceptions raised by the checkout engine.

Rule-source problems (SourceUnreadable, MalformedRules) abort startup but
are only logged on later refreshes unless the cart runs in strict mode.
Cart errors (UnknownSKU, NothingToRemove, CartClosed) always reach the
caller and leave the cart untouched.
"""
from pathlib import Path
from typing import Union


class CheckoutError(Exception):
    """Base class for all checkout errors."""


class RulesError(CheckoutError):
    """The rule source could not be turned into a rule set."""

    def __init__(self, source: Union[str, Path], reason: str):
        self.source = str(source)
        self.reason = reason
        super().__init__(f"{self.source}: {reason}")


class SourceUnreadable(RulesError):
    """The rule file is missing or cannot be read."""


class MalformedRules(RulesError):
    """The rule file was read but is not a valid rule document."""


class UnknownSKU(CheckoutError):
    """The SKU is not in the current rule set."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"unknown SKU {sku!r}")


class NothingToRemove(CheckoutError):
    """Remove was called for a SKU with no scanned units."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"no {sku!r} in cart to remove")


class CartClosed(CheckoutError):
    """The cart was finalized and no longer accepts changes."""

    def __init__(self):
        super().__init__("cart is closed")
