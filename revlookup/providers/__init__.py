"""Reverse lookup providers."""

from __future__ import annotations

from .base import LookupContext, LookupProvider, ProviderConfigError
from .content_db import AreaCodeDbConfig, AreaCodeDbProvider, create_area_code_db
from .opencnam import OpenCnamConfig, OpenCnamProvider
from .web_scrape import WebScrapeConfig, WebScrapeProvider, whitepages_config

__all__ = [
    "LookupContext",
    "LookupProvider",
    "ProviderConfigError",
    "AreaCodeDbConfig",
    "AreaCodeDbProvider",
    "create_area_code_db",
    "OpenCnamConfig",
    "OpenCnamProvider",
    "WebScrapeConfig",
    "WebScrapeProvider",
    "whitepages_config",
]
