"""Random test data for checkout flows."""

import random
import time
from dataclasses import dataclass
from typing import Sequence, TypeVar

from .models import CheckoutInfo

T = TypeVar("T")


@dataclass(frozen=True)
class TestData:
    """A throwaway shopper identity."""

    __test__ = False  # not a pytest test class

    email: str
    username: str
    first_name: str
    last_name: str
    password: str
    zip_code: str

    def checkout_info(self) -> CheckoutInfo:
        return CheckoutInfo(
            first_name=self.first_name,
            last_name=self.last_name,
            postal_code=self.zip_code,
        )


def generate_test_data(timestamp: int | None = None) -> TestData:
    """Generate a shopper identity unique to the current millisecond."""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    return TestData(
        email=f"test.user.{timestamp}@example.com",
        username=f"testUser{timestamp}",
        first_name="Test",
        last_name="User",
        password="TestPass123!",
        zip_code="12345",
    )


def get_random_item(items: Sequence[T], rng: random.Random | None = None) -> T:
    """Pick one element at random."""
    if not items:
        raise ValueError("Cannot pick from an empty sequence")
    return (rng or random).choice(items)
