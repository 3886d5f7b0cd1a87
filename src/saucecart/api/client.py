"""Async API client backed by an in-process SessionStore."""

from typing import Any

from ..backend.store import SessionStore
from ..config import Config
from ..models import ApiResponse, CheckoutInfo
from .router import Router


class ApiClient:
    """Asynchronous facade over a SessionStore.

    Mirrors a network API client: named operations plus generic verbs.
    Every coroutine completes without suspending.
    """

    def __init__(self, store: SessionStore | None = None, config: Config | None = None):
        self.config = config or (store.config if store else Config())
        self.store = store
        self.router: Router | None = None
        if store is not None:
            self.router = Router(store)

    async def init(self) -> "ApiClient":
        """Create the backing store if one was not given."""
        if self.store is None:
            self.store = SessionStore(self.config)
            self.router = Router(self.store)
        return self

    def set_token(self, token: str) -> None:
        self._require_store().set_token(token)

    async def login(self, username: str, password: str) -> ApiResponse:
        return self._require_store().login(username, password)

    async def get_products(self) -> ApiResponse:
        return self._require_store().get_products()

    async def add_to_cart(self, product_id: str) -> ApiResponse:
        return self._require_store().add_to_cart(product_id)

    async def remove_from_cart(self, product_id: str) -> ApiResponse:
        return self._require_store().remove_from_cart(product_id)

    async def get_cart(self) -> ApiResponse:
        return self._require_store().get_cart()

    async def checkout(self, info: CheckoutInfo | dict) -> ApiResponse:
        return self._require_store().checkout(info)

    async def get_order_details(self, order_id: str) -> ApiResponse:
        return self._require_store().get_order_details(order_id)

    async def get(self, endpoint: str) -> ApiResponse:
        return self._dispatch("GET", endpoint)

    async def post(self, endpoint: str, data: Any = None) -> ApiResponse:
        return self._dispatch("POST", endpoint, data)

    async def put(self, endpoint: str, data: Any = None) -> ApiResponse:
        return self._dispatch("PUT", endpoint, data)

    async def delete(self, endpoint: str) -> ApiResponse:
        return self._dispatch("DELETE", endpoint)

    def _dispatch(self, method: str, endpoint: str, data: Any = None) -> ApiResponse:
        self._require_store()
        return self.router.dispatch(method, endpoint, data)

    def _require_store(self) -> SessionStore:
        if self.store is None:
            raise RuntimeError("ApiClient.init() must be awaited before use")
        return self.store
