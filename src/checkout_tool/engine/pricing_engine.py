"""
Pricing Engine - turns scanned quantities into a priced receipt.

Bundles are formed greedily: as many complete `count`-unit groups as the
quantity allows, each at the bundle price, with the remainder at unit price.
"""
from typing import Mapping, Optional

from .models import LineItem, PricingRule, Receipt, RuleSet


def price_line(quantity: int, rule: PricingRule) -> int:
    """Price `quantity` units of one SKU under `rule`."""
    special = rule.special_price
    if special is None or quantity < special.count:
        return quantity * rule.unit_price

    bundles = quantity // special.count
    remainder = quantity - bundles * special.count
    return bundles * special.price + remainder * rule.unit_price


def build_line(sku: str, quantity: int, rule: Optional[PricingRule]) -> LineItem:
    """Price one SKU with a trace of how the amount was reached."""
    if rule is None:
        line = LineItem(sku=sku, quantity=quantity, unit_price=0)
        line.add_trace("Rule Lookup", "No rule in current rule set", sku)
        line.add_warning(f"SKU {sku} is no longer priced; counted as 0")
        return line

    line = LineItem(sku=sku, quantity=quantity, unit_price=rule.unit_price)
    line.add_trace("Rule Lookup", rule.describe(), sku)

    special = rule.special_price
    if special is not None and quantity >= special.count:
        line.bundles = quantity // special.count
        line.bundle_count = special.count
        line.bundle_price = special.price
        line.remainder = quantity - line.bundles * special.count
        line.add_trace("Bundles", f"{line.bundles} × {special.count} for {special.price}",
                       str(line.bundles * special.price))
    else:
        line.remainder = quantity
        if special is not None:
            line.add_trace("Bundles", f"Quantity {quantity} below bundle size {special.count}")

    if line.remainder:
        line.add_trace("Unit Price", f"{line.remainder} × {rule.unit_price}",
                       str(line.remainder * rule.unit_price))

    line.extended_price = price_line(quantity, rule)
    line.add_trace("Extension", f"Quantity {quantity}", str(line.extended_price))
    return line


def calculate(quantities: Mapping[str, int], rules: RuleSet) -> Receipt:
    """
    Price every SKU with a positive quantity against one rule snapshot.

    SKUs with no rule (dropped by a reload after being scanned) contribute
    nothing and add a warning to the receipt.
    """
    receipt = Receipt(total=0, lines=[], rules_loaded_at=rules.loaded_at)
    receipt.add_trace("Rules", f"Pricing against {len(rules)} rules", rules.source)

    for sku in sorted(quantities):
        quantity = quantities[sku]
        if quantity <= 0:
            continue

        line = build_line(sku, quantity, rules.get(sku))
        receipt.lines.append(line)
        receipt.total += line.extended_price

        # Bubble up line warnings
        for warning in line.warnings:
            if warning not in receipt.warnings:
                receipt.add_warning(warning)

    receipt.add_trace("Total", f"{len(receipt.lines)} lines", str(receipt.total))
    return receipt
