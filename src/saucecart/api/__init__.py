"""API module - REST-style access to the session store."""

from .client import ApiClient
from .router import ROUTES, Route, Router

__all__ = ["ApiClient", "ROUTES", "Route", "Router"]
