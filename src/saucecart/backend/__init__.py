"""Backend module - the in-memory cart/checkout API."""

from .cart import Cart
from .catalog import CATALOG, find_product
from .store import Session, SessionStore

__all__ = ["CATALOG", "Cart", "Session", "SessionStore", "find_product"]
