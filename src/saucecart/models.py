"""Core data models for saucecart."""

import copy
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable


class SaucecartError(Exception):
    """Base class for saucecart errors."""


class ApiError(SaucecartError):
    """Raised by ApiResponse.raise_for_status() for non-2xx responses."""

    def __init__(self, response: "ApiResponse"):
        self.response = response
        super().__init__(f"{response.status}: {response.text()}")


class ScenarioError(SaucecartError):
    """A scenario file could not be understood."""


class ConfigError(SaucecartError):
    """The configuration file could not be read."""


class AuthState(Enum):
    """Authentication gate of a session."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class ErrorKind(Enum):
    """Error taxonomy of the mock API, as (status, label)."""

    VALIDATION = (400, "validation")
    UNAUTHORIZED = (401, "unauthorized")
    INVALID_CREDENTIALS = (401, "invalid_credentials")
    FORBIDDEN = (403, "forbidden")
    NOT_FOUND = (404, "not_found")
    METHOD_NOT_ALLOWED = (405, "method_not_allowed")

    @property
    def status(self) -> int:
        return self.value[0]


@dataclass(frozen=True)
class Product:
    """A catalog product. Prices are decimal strings."""

    id: str
    name: str
    price: str
    description: str
    image_url: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class CheckoutInfo:
    """Shipping details submitted at checkout."""

    first_name: str = ""
    last_name: str = ""
    postal_code: str = ""

    @classmethod
    def from_payload(cls, payload: dict | None) -> "CheckoutInfo":
        """Build from a {firstName, lastName, postalCode} mapping."""
        payload = payload or {}
        return cls(
            first_name=str(payload.get("firstName", "")),
            last_name=str(payload.get("lastName", "")),
            postal_code=str(payload.get("postalCode", "")),
        )

    def to_payload(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "postalCode": self.postal_code,
        }


@dataclass(frozen=True)
class Order:
    """An order recorded at checkout time."""

    order_id: str
    items: tuple[str, ...]
    shipping: CheckoutInfo
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ApiResponse:
    """A synthesized API response."""

    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Return a copy of the body so callers cannot mutate store state."""
        return copy.deepcopy(self.body)

    def text(self) -> str:
        return json.dumps(self.body)

    def raise_for_status(self) -> "ApiResponse":
        if not self.ok:
            raise ApiError(self)
        return self

    @classmethod
    def error(cls, kind: ErrorKind, message: str, key: str = "error") -> "ApiResponse":
        """Build an error response from the taxonomy."""
        return cls(kind.status, {key: message})


def cart_view(product_ids: Iterable[str]) -> list[dict]:
    """Project a sequence of product ids into [{"id": ...}, ...]."""
    return [{"id": product_id} for product_id in product_ids]


@dataclass
class JournalEntry:
    """A request recorded by the store."""

    operation: str
    status: int
    method: str | None = None
    url: str | None = None
    args: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "status": self.status,
            "method": self.method,
            "url": self.url,
            "args": self.args,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class StepResult:
    """Outcome of a single scenario step."""

    name: str
    method: str
    path: str
    expected_status: int | None
    actual_status: int
    body: Any = None
    failures: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures


@dataclass
class ScenarioReport:
    """Summary report of a scenario run."""

    name: str
    steps: list[StepResult]

    @property
    def passed(self) -> bool:
        return all(step.passed for step in self.steps)

    @property
    def failed_count(self) -> int:
        return sum(1 for step in self.steps if not step.passed)
