"""Configuration management for saucecart."""

import os
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ConfigError

# Load .env file at import time
load_dotenv()


class AuthConfig(BaseModel):
    """Known identities of the mock login."""

    valid_username: str = "standard_user"
    valid_password: str = "secret_sauce"
    locked_usernames: list[str] = Field(default_factory=lambda: ["locked_out_user"])
    token: str = "fake-token-123"


class PricingConfig(BaseModel):
    """Cart pricing and order-detail placeholders."""

    tax_rate: float = 0.08
    placeholder_total: str = "39.98"
    placeholder_tax: str = "3.20"
    shipping_address: str = "Test Address"


class OrdersConfig(BaseModel):
    """Checkout behavior."""

    id_prefix: str = "order-"
    order_items_source: Literal["snapshot", "live"] = "snapshot"
    clear_cart_on_checkout: bool = False


class TracingConfig(BaseModel):
    """Langfuse observability configuration."""

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None


class Config(BaseSettings):
    """Main configuration for saucecart."""

    model_config = SettingsConfigDict(
        env_prefix="SAUCECART_",
        env_nested_delimiter="__",
    )

    base_url: str = Field(default_factory=lambda: os.environ.get("BASE_URL", "https://www.saucedemo.com"))

    # Sub-configurations
    auth: AuthConfig = Field(default_factory=AuthConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    orders: OrdersConfig = Field(default_factory=OrdersConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file and environment variables."""
    config_data: dict = {}

    # Try to find config file
    if config_path is None:
        for name in ["saucecart.yaml", "saucecart.yml", ".saucecart.yaml"]:
            if Path(name).exists():
                config_path = Path(name)
                break

    # Load from YAML if exists
    if config_path and config_path.exists():
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
        if isinstance(raw, dict) and "saucecart" in raw:
            config_data = raw["saucecart"] or {}
        elif raw:
            config_data = raw
        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

    # YAML values win over SAUCECART_* environment variables
    return Config(**config_data)
