"""Tests for rule reporting."""
from checkout_tool.engine import RuleStore
from checkout_tool.services.rules_service import RulesService


def test_rules_frame(rules_file):
    df = RulesService(RuleStore(rules_file)).rules_frame()

    assert list(df['sku']) == ['A', 'B', 'C', 'D']
    assert list(df.columns) == RulesService.COLUMNS
    assert df.loc[df['sku'] == 'A', 'special_price'].iloc[0] == 130
    assert df['special_count'].isna().sum() == 2


def test_get_stats(rules_file):
    stats = RulesService(RuleStore(rules_file)).get_stats()

    assert stats['total'] == 4
    assert stats['with_special'] == 2
    assert stats['without_special'] == 2
    assert stats['min_unit_price'] == 15
    assert stats['max_unit_price'] == 50
    assert stats['last_error'] is None


def test_empty_rules(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text("items: []\n", encoding='utf-8')
    service = RulesService(RuleStore(path))

    assert service.get_stats()['total'] == 0
    assert service.describe().startswith("No pricing rules loaded")


def test_get_rule(rules_file):
    service = RulesService(RuleStore(rules_file))

    assert service.get_rule('D').unit_price == 15
    assert service.get_rule('Q') is None
