"""
Storefront configuration loader (languages, commerce, storage, catalog, shipping).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from storefront.catalog.localization import Languages

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "storefront_config.yml"

DEFAULT_DESTINATIONS: Dict[str, float] = {
    "Dubai": 10,
    "Abu Dhabi": 15,
    "Sharjah": 10,
    "Al Ain": 15,
    "Ajman": 10,
    "Ras Al Khaimah": 15,
    "Fujairah": 15,
    "Umm Al Quwain": 15,
    "Khor Fakkan": 15,
    "Kalba": 60,
}


class LanguagesConfig(BaseModel):
    primary: str = "en"
    secondary: str = "ar"
    default: Optional[str] = None

    @model_validator(mode="after")
    def _check_default(self) -> "LanguagesConfig":
        if self.primary == self.secondary:
            raise ValueError("primary and secondary languages must differ")
        if self.default is None:
            self.default = self.primary
        elif self.default not in (self.primary, self.secondary):
            raise ValueError(f"default language {self.default!r} is not one of the configured languages")
        return self

    def as_languages(self) -> Languages:
        return Languages(primary=self.primary, secondary=self.secondary)


class CommerceConfig(BaseModel):
    tax_rate: float = Field(default=0.05, ge=0.0, le=1.0)
    currency: str = "AED"


class StorageConfig(BaseModel):
    backend: Literal["memory", "redis"] = "memory"
    namespace: str = "storefront"
    max_sessions: int = Field(default=1000, ge=1)
    session_idle_seconds: Optional[float] = Field(default=1800.0, gt=0)


class CatalogConfig(BaseModel):
    source: Literal["local", "http"] = "local"
    base_url: str = ""
    local_path: str = "data/catalog.json"
    timeout_seconds: float = Field(default=20.0, gt=0)


class ShippingConfig(BaseModel):
    destinations: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_DESTINATIONS))

    @model_validator(mode="after")
    def _check_costs(self) -> "ShippingConfig":
        negative = [name for name, cost in self.destinations.items() if cost < 0]
        if negative:
            raise ValueError(f"shipping costs must be >= 0: {', '.join(negative)}")
        return self


class StorefrontConfig(BaseModel):
    languages: LanguagesConfig = Field(default_factory=LanguagesConfig)
    commerce: CommerceConfig = Field(default_factory=CommerceConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    shipping: ShippingConfig = Field(default_factory=ShippingConfig)


def load_storefront_config(config_path: Optional[Path] = None) -> StorefrontConfig:
    """
    Load and validate the storefront configuration from a YAML file.

    Args:
        config_path: Path to config file. Defaults to $STOREFRONT_CONFIG, then
            config/storefront_config.yml

    Returns:
        Validated StorefrontConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        env_path = os.getenv("STOREFRONT_CONFIG")
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Storefront config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = StorefrontConfig(**data)
        logger.info("Successfully loaded storefront config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Storefront config validation failed: %s", e)
        raise
