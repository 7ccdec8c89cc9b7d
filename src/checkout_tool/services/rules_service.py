"""
Rules Service - read-only reporting over the loaded pricing rules.

Feeds the CLI rule dump, the rules API and the Streamlit rules tab.
"""
from typing import Optional

import pandas as pd

from ..engine.models import PricingRule
from ..engine.rule_store import RuleStore


class RulesService:
    """Service for listing and summarizing pricing rules."""

    COLUMNS = ['sku', 'unit_price', 'special_count', 'special_price', 'description']

    def __init__(self, store: RuleStore):
        self.store = store

    def list_rules(self) -> list[PricingRule]:
        """List all rules in the current snapshot, sorted by SKU."""
        return list(self.store.snapshot)

    def get_rule(self, sku: str) -> Optional[PricingRule]:
        """Get a single rule by SKU."""
        return self.store.snapshot.get(sku)

    def rules_frame(self) -> pd.DataFrame:
        """One row per SKU; special columns are empty for plain-priced SKUs."""
        rows = [
            {
                'sku': rule.sku,
                'unit_price': rule.unit_price,
                'special_count': rule.special_price.count if rule.special_price else None,
                'special_price': rule.special_price.price if rule.special_price else None,
                'description': rule.describe(),
            }
            for rule in self.list_rules()
        ]
        df = pd.DataFrame(rows, columns=self.COLUMNS)
        # Keep integer columns integer even with gaps
        for col in ('special_count', 'special_price'):
            df[col] = df[col].astype('Int64')
        return df

    def get_stats(self) -> dict:
        """Get statistics about the loaded rules."""
        df = self.rules_frame()
        with_special = int(df['special_count'].notna().sum())

        return {
            'source': str(self.store.source),
            'loaded_at': self.store.snapshot.loaded_at.isoformat(),
            'total': len(df),
            'with_special': with_special,
            'without_special': len(df) - with_special,
            'min_unit_price': int(df['unit_price'].min()) if len(df) else None,
            'max_unit_price': int(df['unit_price'].max()) if len(df) else None,
            'refresh_count': self.store.refresh_count,
            'last_error': str(self.store.last_error) if self.store.last_error else None,
        }

    def describe(self) -> str:
        """Plain-text rule table for terminal output."""
        df = self.rules_frame()
        if df.empty:
            return f"No pricing rules loaded from {self.store.source}"
        table = df[['sku', 'unit_price', 'special_count', 'special_price']].to_string(
            index=False, na_rep='-'
        )
        return f"Pricing rules from {self.store.source}:\n{table}"
