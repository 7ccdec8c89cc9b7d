import sys
import os
import textwrap
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

TEST_PRICING = Path(__file__).parent / 'test-pricing.yaml'


@pytest.fixture
def test_pricing() -> Path:
    """The shared, read-only A/B/C/D rule file."""
    return TEST_PRICING


@pytest.fixture
def rules_file(tmp_path) -> Path:
    """A private copy of the A/B/C/D rules that a test may rewrite."""
    path = tmp_path / 'pricing.yaml'
    path.write_text(TEST_PRICING.read_text(encoding='utf-8'), encoding='utf-8')
    return path


@pytest.fixture
def write_rules():
    """Write a YAML rule document, dedenting test literals."""
    def _write(path: Path, text: str) -> Path:
        path.write_text(textwrap.dedent(text).lstrip(), encoding='utf-8')
        return path
    return _write


@pytest.fixture
def checkout(rules_file):
    from checkout_tool.engine import Checkout
    return Checkout(rules_file)
