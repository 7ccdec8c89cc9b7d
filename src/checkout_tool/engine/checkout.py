"""
Checkout - the cart state machine.

Every operation first refreshes the rule store so edits to the rule file
take effect on the next scan, remove or total, including for units that
were scanned before the edit.
"""
from pathlib import Path
from typing import Optional, Union

from ..config.settings import Settings, get_settings
from ..utils.logger import get_logger
from .errors import CartClosed, NothingToRemove, RulesError
from .locking import ReadWriteLock
from .models import Receipt, RuleSet
from .pricing_engine import calculate
from .rule_store import RuleStore

logger = get_logger(__name__)


class Checkout:
    """
    A single cart priced against a live rule file.

    Scan and remove are writers, totals are readers; both share one
    reader/writer lock with the rule store, so a rule swap never lands in
    the middle of an operation.

    With `strict_refresh=False` (the default) a failed refresh is logged and
    the cart keeps pricing with the last good rules. With
    `strict_refresh=True` the RulesError is raised from the operation and
    the cart is left unchanged.

    `finalize()` closes the cart: later scans and removes raise CartClosed,
    totals and receipts stay readable.
    """

    def __init__(self, rules_path: Union[str, Path], strict_refresh: bool = False):
        self._lock = ReadWriteLock()
        self._store = RuleStore(rules_path, lock=self._lock)
        self._scanned: dict[str, int] = {}
        self._closed = False
        self.strict_refresh = strict_refresh

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'Checkout':
        settings = settings or get_settings()
        return cls(settings.rules_path, strict_refresh=settings.strict_refresh)

    @property
    def rules_path(self) -> Path:
        return self._store.source

    @property
    def store(self) -> RuleStore:
        return self._store

    @property
    def rules(self) -> RuleSet:
        return self._store.snapshot

    @property
    def closed(self) -> bool:
        return self._closed

    def _refresh(self):
        try:
            self._store.refresh()
        except RulesError as e:
            if self.strict_refresh:
                raise
            logger.warning("Rule refresh failed, keeping previous rules: %s", e)

    def refresh_rules(self) -> RuleSet:
        """Reload the rule file now, raising on failure regardless of mode."""
        return self._store.refresh()

    def scan(self, sku: str) -> Receipt:
        """Add one unit of sku and return the repriced cart. Raises UnknownSKU or CartClosed."""
        self._refresh()
        with self._lock.write():
            if self._closed:
                raise CartClosed()
            self._store.snapshot.require(sku)
            count = self._scanned.get(sku, 0) + 1
            self._scanned[sku] = count
            receipt = calculate(self._scanned, self._store.snapshot)
        logger.debug("Scanned %s (qty %d)", sku, count)
        return receipt

    def remove(self, sku: str) -> Receipt:
        """
        Take one unit of sku back out and return the repriced cart.

        Raises UnknownSKU, NothingToRemove or CartClosed.
        """
        self._refresh()
        with self._lock.write():
            if self._closed:
                raise CartClosed()
            self._store.snapshot.require(sku)
            count = self._scanned.get(sku, 0)
            if count == 0:
                raise NothingToRemove(sku)
            if count == 1:
                del self._scanned[sku]
            else:
                self._scanned[sku] = count - 1
            receipt = calculate(self._scanned, self._store.snapshot)
        logger.debug("Removed %s", sku)
        return receipt

    def receipt(self) -> Receipt:
        """Price the cart against the freshest rules."""
        self._refresh()
        with self._lock.read():
            return calculate(self._scanned, self._store.snapshot)

    def get_total_price(self) -> int:
        return self.receipt().total

    def quantities(self) -> dict[str, int]:
        with self._lock.read():
            return dict(self._scanned)

    def finalize(self) -> Receipt:
        """Price the cart one last time and close it."""
        self._refresh()
        with self._lock.write():
            receipt = calculate(self._scanned, self._store.snapshot)
            self._closed = True
        logger.info("Cart finalized: %d items, total %d", receipt.item_count, receipt.total)
        return receipt
