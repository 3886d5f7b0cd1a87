"""saucecart - in-process mock of a shop's cart and checkout API."""

__version__ = "0.1.0"
