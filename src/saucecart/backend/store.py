"""In-memory session store emulating the shop's cart/checkout API."""

import logging
import time
import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from ..config import Config
from ..models import (
    ApiResponse,
    AuthState,
    CheckoutInfo,
    ErrorKind,
    JournalEntry,
    Order,
    cart_view,
)
from ..tracing import TracingClient, traced_operation
from .cart import Cart
from .catalog import CATALOG, price_of

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class Session:
    """Token and cart owned by a single store."""

    token: str = ""
    cart: Cart = field(default_factory=Cart)

    @property
    def state(self) -> AuthState:
        return AuthState.AUTHENTICATED if self.token else AuthState.ANONYMOUS


class SessionStore:
    """Stand-in for the remote shop API.

    Every operation answers synchronously with an ApiResponse; API-level
    failures are expressed as status codes, never raised. Instances share
    no state, so each test gets its own session by building its own store.
    """

    def __init__(
        self,
        config: Config | None = None,
        tracing: TracingClient | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or Config()
        self.tracing = tracing
        self.session = Session()
        self.session_id = uuid.uuid4().hex[:8]
        self.journal: list[JournalEntry] = []
        self._orders: dict[str, Order] = {}
        self._clock = clock
        self._last_order_ms = 0

    @property
    def token(self) -> str:
        return self.session.token

    @property
    def cart(self) -> Cart:
        return self.session.cart

    @property
    def orders(self) -> dict[str, Order]:
        """Orders placed through this store, keyed by order id."""
        return dict(self._orders)

    def set_token(self, token: str) -> None:
        """Record the bearer token used by subsequent calls."""
        self.session.token = token or ""
        logger.debug("Session %s is now %s", self.session_id, self.session.state.value)

    @traced_operation("login")
    def login(self, username: str, password: str) -> ApiResponse:
        """Check credentials. The returned token must be passed to set_token()."""
        auth = self.config.auth

        if not username or not password:
            response = ApiResponse.error(ErrorKind.VALIDATION, "Username and password are required")
        elif username == auth.valid_username and password == auth.valid_password:
            response = ApiResponse(200, {"token": auth.token})
        elif username in auth.locked_usernames:
            response = ApiResponse.error(ErrorKind.FORBIDDEN, "User is locked out")
        else:
            response = ApiResponse.error(ErrorKind.INVALID_CREDENTIALS, "Invalid credentials")

        logger.info("Login for %r answered %d", username, response.status)
        return self._record("login", response, username=username)

    @traced_operation("get_products")
    def get_products(self) -> ApiResponse:
        if denied := self._require_auth():
            return self._record("get_products", denied)
        return self._record("get_products", ApiResponse(200, [p.to_dict() for p in CATALOG]))

    @traced_operation("add_to_cart")
    def add_to_cart(self, product_id: str) -> ApiResponse:
        if denied := self._require_auth():
            return self._record("add_to_cart", denied, product_id=product_id)

        if not self.cart.add(product_id):
            response = ApiResponse.error(ErrorKind.VALIDATION, "Product already in cart", key="message")
        else:
            response = ApiResponse(200, {"items": self.cart.view()})
        return self._record("add_to_cart", response, product_id=product_id)

    @traced_operation("remove_from_cart")
    def remove_from_cart(self, product_id: str) -> ApiResponse:
        if denied := self._require_auth():
            return self._record("remove_from_cart", denied, product_id=product_id)

        if not self.cart.remove(product_id):
            logger.debug("Product %r was not in the cart", product_id)
        return self._record("remove_from_cart", ApiResponse(200, {"items": self.cart.view()}), product_id=product_id)

    @traced_operation("get_cart")
    def get_cart(self) -> ApiResponse:
        """Cart contents with catalog-priced totals."""
        if denied := self._require_auth():
            return self._record("get_cart", denied)

        total = sum((price_of(product_id) for product_id in self.cart), Decimal("0"))
        tax = total * Decimal(str(self.config.pricing.tax_rate))
        body = {
            "items": self.cart.view(),
            "total": _money(total),
            "tax": _money(tax),
            "finalTotal": _money(total + tax),
        }
        return self._record("get_cart", ApiResponse(200, body))

    @traced_operation("checkout")
    def checkout(self, info: CheckoutInfo | dict | None = None) -> ApiResponse:
        """Place an order for the current cart.

        Shipping details are recorded as given; field validation belongs to
        the UI layer.
        """
        if denied := self._require_auth():
            return self._record("checkout", denied)

        if not len(self.cart):
            response = ApiResponse.error(ErrorKind.VALIDATION, "Cart is empty", key="message")
            return self._record("checkout", response)

        if not isinstance(info, CheckoutInfo):
            info = CheckoutInfo.from_payload(info)

        order = Order(order_id=self._next_order_id(), items=self.cart.snapshot(), shipping=info)
        self._orders[order.order_id] = order
        logger.info("Order %s placed with %d item(s)", order.order_id, len(order.items))

        if self.config.orders.clear_cart_on_checkout:
            self.cart.clear()

        response = ApiResponse(200, {"orderId": order.order_id, "items": cart_view(order.items)})
        return self._record("checkout", response, order_id=order.order_id)

    @traced_operation("get_order_details")
    def get_order_details(self, order_id: str) -> ApiResponse:
        """Order details with placeholder totals.

        Known orders report the items snapshotted at checkout. Unknown ids
        are not rejected and fall back to the live cart.
        """
        if denied := self._require_auth():
            return self._record("get_order_details", denied, order_id=order_id)

        order = self._orders.get(order_id)
        if self.config.orders.order_items_source == "snapshot" and order is not None:
            items = order.items
        else:
            if order is None:
                logger.warning("Order %r is unknown, reporting the live cart", order_id)
            items = self.cart.snapshot()

        pricing = self.config.pricing
        body = {
            "orderId": order_id,
            "items": cart_view(items),
            "total": pricing.placeholder_total,
            "tax": pricing.placeholder_tax,
            "shippingAddress": pricing.shipping_address,
        }
        return self._record("get_order_details", ApiResponse(200, body), order_id=order_id)

    def _require_auth(self) -> ApiResponse | None:
        if self.session.state is AuthState.ANONYMOUS:
            return ApiResponse.error(ErrorKind.UNAUTHORIZED, "Unauthorized")
        return None

    def _next_order_id(self) -> str:
        # Millisecond timestamps, bumped so ids stay unique within a store
        now_ms = int(self._clock() * 1000)
        if now_ms <= self._last_order_ms:
            now_ms = self._last_order_ms + 1
        self._last_order_ms = now_ms
        return f"{self.config.orders.id_prefix}{now_ms}"

    def _record(self, operation: str, response: ApiResponse, **args) -> ApiResponse:
        self.journal.append(JournalEntry(operation=operation, status=response.status, args=args))
        logger.debug("%s %s -> %d", self.session_id, operation, response.status)
        return response


def _money(amount: Decimal) -> str:
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))
