"""
Data models for the checkout engine.

Rules are frozen dataclasses; a RuleSet wraps them in a read-only mapping
so a loaded snapshot can be shared between threads without copying.
"""
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from .errors import UnknownSKU


@dataclass(frozen=True)
class SpecialPrice:
    """Bundle offer: `count` units for `price`."""
    count: int
    price: int


@dataclass(frozen=True)
class PricingRule:
    """Pricing for one SKU, in minor currency units."""
    sku: str
    unit_price: int
    special_price: Optional[SpecialPrice] = None

    @property
    def has_special(self) -> bool:
        return self.special_price is not None

    def describe(self) -> str:
        """Human-readable one-liner, e.g. '50 each, 3 for 130'."""
        text = f"{self.unit_price} each"
        if self.special_price:
            text += f", {self.special_price.count} for {self.special_price.price}"
        return text


class RuleSet:
    """Immutable point-in-time mapping of SKU to PricingRule."""

    def __init__(self, rules: Mapping[str, PricingRule], source: Optional[str] = None,
                 loaded_at: Optional[datetime] = None):
        self._rules = MappingProxyType(dict(rules))
        self.source = source
        self.loaded_at = loaded_at or datetime.now()

    def get(self, sku: str) -> Optional[PricingRule]:
        return self._rules.get(sku)

    def require(self, sku: str) -> PricingRule:
        """Return the rule for sku or raise UnknownSKU."""
        rule = self._rules.get(sku)
        if rule is None:
            raise UnknownSKU(sku)
        return rule

    @property
    def skus(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, sku: object) -> bool:
        return sku in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[PricingRule]:
        for sku in self.skus:
            yield self._rules[sku]

    def __repr__(self) -> str:
        return f"RuleSet({len(self)} rules from {self.source!r})"


@dataclass
class TraceStep:
    """A single step in the pricing trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class LineItem:
    """Priced contribution of one SKU to the total."""
    sku: str
    quantity: int
    unit_price: int
    extended_price: int = 0
    bundles: int = 0
    bundle_count: Optional[int] = None
    bundle_price: Optional[int] = None
    remainder: int = 0
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this line item."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning for this line item."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


@dataclass
class Receipt:
    """Complete pricing of a cart against one rule snapshot."""
    total: int
    lines: list[LineItem]
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)
    rules_loaded_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the receipt-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a receipt-level warning."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable receipt trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Plain dict for JSON responses and tables."""
        return {
            "total": self.total,
            "items": self.item_count,
            "lines": [
                {
                    "sku": line.sku,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "bundles": line.bundles,
                    "bundle_count": line.bundle_count,
                    "bundle_price": line.bundle_price,
                    "remainder": line.remainder,
                    "extended_price": line.extended_price,
                    "warnings": list(line.warnings),
                }
                for line in self.lines
            ],
            "warnings": list(self.warnings),
            "rules_loaded_at": self.rules_loaded_at.isoformat() if self.rules_loaded_at else None,
        }
