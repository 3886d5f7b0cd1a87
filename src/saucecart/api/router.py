"""Route conceptual REST requests onto a SessionStore."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import unquote

from ..backend.store import SessionStore
from ..models import ApiResponse, ErrorKind, JournalEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """One method + path pattern bound to a handler."""

    method: str
    pattern: re.Pattern
    handler: Callable[[SessionStore, dict, Any], ApiResponse]

    def match(self, path: str) -> dict | None:
        if match := self.pattern.fullmatch(path):
            return {name: unquote(value) for name, value in match.groupdict().items()}
        return None


def _compile(template: str) -> re.Pattern:
    """Turn '/cart/items/{id}' into a regex with named groups."""
    return re.compile(re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", template))


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def _login(store: SessionStore, params: dict, data: Any) -> ApiResponse:
    body = _payload(data)
    return store.login(body.get("username", ""), body.get("password", ""))


def _add_item(store: SessionStore, params: dict, data: Any) -> ApiResponse:
    body = _payload(data)
    product_id = body.get("productId", body.get("id", ""))
    return store.add_to_cart(str(product_id))


ROUTES: tuple[Route, ...] = (
    Route("POST", _compile("/login"), _login),
    Route("GET", _compile("/products"), lambda store, params, data: store.get_products()),
    Route("GET", _compile("/cart"), lambda store, params, data: store.get_cart()),
    Route("POST", _compile("/cart/items"), _add_item),
    Route("DELETE", _compile("/cart/items/{id}"), lambda store, params, data: store.remove_from_cart(params["id"])),
    Route("POST", _compile("/checkout"), lambda store, params, data: store.checkout(_payload(data))),
    Route("GET", _compile("/orders/{id}"), lambda store, params, data: store.get_order_details(params["id"])),
)


class Router:
    """Dispatch (method, path, json) requests to a store."""

    def __init__(self, store: SessionStore, routes: tuple[Route, ...] = ROUTES):
        self.store = store
        self.routes = routes

    def dispatch(self, method: str, path: str, data: Any = None) -> ApiResponse:
        """Answer a request the way the remote API would."""
        method = method.upper()
        path = self._normalize(path)

        path_matched = False
        for route in self.routes:
            params = route.match(path)
            if params is None:
                continue
            path_matched = True
            if route.method != method:
                continue

            journal_size = len(self.store.journal)
            response = route.handler(self.store, params, data)
            self._tag(journal_size, method, path)
            return response

        if path_matched:
            response = ApiResponse.error(ErrorKind.METHOD_NOT_ALLOWED, "Method not allowed")
        else:
            response = ApiResponse.error(ErrorKind.NOT_FOUND, "Not found")
        logger.debug("No route for %s %s (%d)", method, path, response.status)
        self.store.journal.append(JournalEntry(
            operation="route",
            status=response.status,
            method=method,
            url=self._url(path),
        ))
        return response

    def _normalize(self, path: str) -> str:
        path = "/" + path.split("?", 1)[0].strip("/")
        if path == "/api" or path.startswith("/api/"):
            path = path[len("/api"):] or "/"
        return path

    def _tag(self, journal_size: int, method: str, path: str) -> None:
        """Attach HTTP details to the entries the store just recorded."""
        for entry in self.store.journal[journal_size:]:
            entry.method = method
            entry.url = self._url(path)

    def _url(self, path: str) -> str:
        return self.store.config.base_url.rstrip("/") + path
