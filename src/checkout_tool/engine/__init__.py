"""Engine subpackage - rule store, pricing and the cart state machine."""
from .checkout import Checkout
from .errors import (
    CartClosed,
    CheckoutError,
    MalformedRules,
    NothingToRemove,
    RulesError,
    SourceUnreadable,
    UnknownSKU,
)
from .models import LineItem, PricingRule, Receipt, RuleSet, SpecialPrice
from .pricing_engine import calculate, price_line
from .rule_store import RuleStore, load_rules

__all__ = [
    'Checkout', 'RuleStore', 'load_rules', 'calculate', 'price_line',
    'PricingRule', 'SpecialPrice', 'RuleSet', 'LineItem', 'Receipt',
    'CheckoutError', 'RulesError', 'SourceUnreadable', 'MalformedRules',
    'UnknownSKU', 'NothingToRemove', 'CartClosed',
]
