"""
Shared cart for the API process.

Built lazily from settings on first request so importing the app does not
require a rule file.
"""
import threading
from typing import Optional

from ..config.settings import get_settings
from ..engine import Checkout

_checkout: Optional[Checkout] = None
_init_lock = threading.Lock()


def get_checkout() -> Checkout:
    """FastAPI dependency returning the process-wide cart."""
    global _checkout
    with _init_lock:
        if _checkout is None:
            _checkout = Checkout.from_settings(get_settings())
        return _checkout


def reset_checkout(checkout: Optional[Checkout] = None):
    """Replace the shared cart (a new session), or drop it."""
    global _checkout
    with _init_lock:
        _checkout = checkout
