"""
Rule Store - loads pricing rules from YAML and keeps them fresh.

Rule file format:

    items:
      - sku: "A"
        unit_price: 50
        special_price:
          count: 3
          price: 130
      - sku: "C"
        unit_price: 20

A refresh parses the whole file into a new RuleSet before swapping it in,
so readers only ever see a complete snapshot.
"""
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..utils.logger import get_logger
from .errors import MalformedRules, RulesError, SourceUnreadable, UnknownSKU
from .locking import ReadWriteLock
from .models import PricingRule, RuleSet, SpecialPrice

logger = get_logger(__name__)


def _parse_amount(value: Any, field_name: str, position: str, source: Path, minimum: int = 0) -> int:
    """Parse a required non-negative integer field."""
    # bool is an int subclass; `unit_price: true` is not a price
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRules(source, f"{position}: {field_name} must be an integer, got {value!r}")
    if value < minimum:
        raise MalformedRules(source, f"{position}: {field_name} must be >= {minimum}, got {value}")
    return value


def _parse_sku(value: Any, position: str, source: Path) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MalformedRules(source, f"{position}: sku is required")
    sku = str(value).strip()
    if not sku:
        raise MalformedRules(source, f"{position}: sku is required")
    return sku


def _parse_special(value: Any, position: str, source: Path) -> Optional[SpecialPrice]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedRules(source, f"{position}: special_price must be a mapping")
    return SpecialPrice(
        count=_parse_amount(value.get('count'), 'special_price.count', position, source, minimum=1),
        price=_parse_amount(value.get('price'), 'special_price.price', position, source),
    )


def parse_rule(item: Any, index: int, source: Path) -> PricingRule:
    """Parse one entry of the `items` list."""
    position = f"items[{index}]"
    if not isinstance(item, dict):
        raise MalformedRules(source, f"{position}: expected a mapping")

    sku = _parse_sku(item.get('sku'), position, source)
    position = f"{position} ({sku})"
    if 'unit_price' not in item:
        raise MalformedRules(source, f"{position}: unit_price is required")

    return PricingRule(
        sku=sku,
        unit_price=_parse_amount(item['unit_price'], 'unit_price', position, source),
        special_price=_parse_special(item.get('special_price'), position, source),
    )


def load_rules(source: Union[str, Path]) -> RuleSet:
    """
    Read and parse a rule file into a RuleSet.

    Raises SourceUnreadable if the file cannot be read and MalformedRules if
    its content is not a rule document. Duplicate SKUs: the last entry wins.
    """
    path = Path(source)
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise SourceUnreadable(path, str(e)) from e

    try:
        text = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise MalformedRules(path, f"not valid UTF-8: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedRules(path, f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedRules(path, "top level must be a mapping with an 'items' list")

    items = data.get('items')
    if items is None:
        items = []
    if not isinstance(items, list):
        raise MalformedRules(path, "'items' must be a list")

    rules: dict[str, PricingRule] = {}
    for index, item in enumerate(items):
        rule = parse_rule(item, index, path)
        if rule.sku in rules:
            logger.debug("Duplicate SKU %s in %s, keeping the later entry", rule.sku, path)
        rules[rule.sku] = rule

    return RuleSet(rules, source=str(path))


class RuleStore:
    """
    Owns the live RuleSet for one rule file.

    The initial load happens in the constructor and its errors propagate.
    `refresh()` re-reads the file and swaps the snapshot under the write
    lock; on failure the previous snapshot stays in place.
    """

    def __init__(self, source: Union[str, Path], lock: Optional[ReadWriteLock] = None):
        self.source = Path(source)
        self.lock = lock or ReadWriteLock()
        self.refresh_count = 0
        self.last_error: Optional[Exception] = None
        self._rules = load_rules(self.source)
        logger.info("Loaded %d pricing rules from %s", len(self._rules), self.source)

    @property
    def snapshot(self) -> RuleSet:
        """Current rule set. Immutable, so safe to use without the lock."""
        return self._rules

    def refresh(self) -> RuleSet:
        """Reload the rule file and swap in the result."""
        try:
            rules = load_rules(self.source)
        except RulesError as e:
            with self.lock.write():
                self.last_error = e
            raise

        with self.lock.write():
            self._rules = rules
            self.refresh_count += 1
            self.last_error = None
        return rules

    def lookup(self, sku: str) -> PricingRule:
        with self.lock.read():
            rule = self._rules.get(sku)
        if rule is None:
            raise UnknownSKU(sku)
        return rule
