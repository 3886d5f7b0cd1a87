"""Order-preserving set of product ids."""

from typing import Iterator

from ..models import cart_view


class Cart:
    """Cart contents in insertion order, without duplicates."""

    def __init__(self):
        self._items: list[str] = []

    def add(self, product_id: str) -> bool:
        """Append a product. Returns False if it is already present."""
        if product_id in self._items:
            return False
        self._items.append(product_id)
        return True

    def remove(self, product_id: str) -> bool:
        """Drop a product. Returns False if it was not present."""
        before = len(self._items)
        self._items = [item for item in self._items if item != product_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self._items)

    def view(self) -> list[dict]:
        """Cart view as returned in responses."""
        return cart_view(self._items)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Cart({self._items!r})"
