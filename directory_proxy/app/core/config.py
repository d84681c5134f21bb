"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field so the
application can start (with an empty directory) without any
environment at all.  Tests and embedding code may construct
``Settings`` explicitly and hand it to ``create_app``.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Directory Proxy")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # All routes are mounted below this prefix.  Storefront themes call
    # ``/proxy/directory`` so the default keeps that contract.
    api_prefix: str = os.getenv("API_PREFIX", "/proxy")

    # Shopify Admin GraphQL access.
    shop_domain: str = os.getenv("SHOP_DOMAIN", "")
    shopify_admin_token: str = os.getenv("SHOPIFY_ADMIN_TOKEN", "")
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION", "2025-10")
    upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))

    # Metaobject definition types queried upstream.
    listing_metaobject_type: str = os.getenv("LISTING_METAOBJECT_TYPE", "directory_listing")
    category_metaobject_type: str = os.getenv("CATEGORY_METAOBJECT_TYPE", "category")

    # ``label`` keys the group index by the trimmed group label, ``slug``
    # keys it by the normalized label.
    group_key_mode: str = os.getenv("GROUP_KEY_MODE", "label")

    # Durable JSON documents.  Relative paths are resolved against the
    # current working directory.
    cache_dir: str = os.getenv("CACHE_DIR", "cache")
    media_cache_file: str = os.getenv("MEDIA_CACHE_FILE", "mediaGidCache.json")
    category_groups_file: str = os.getenv("CATEGORY_GROUPS_FILE", "categoryGroups.json")

    # Edge cache invalidation webhook.  Leave the URL empty to disable.
    invalidator_url: str = os.getenv("CF_INVALIDATOR_URL", "")
    invalidate_key: str = os.getenv("INVALIDATE_KEY", "")

    # Comma‑separated list of allowed CORS origins.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.shopify_api_version}/graphql.json"

    @property
    def media_cache_path(self) -> Path:
        return Path(self.cache_dir) / self.media_cache_file

    @property
    def category_groups_path(self) -> Path:
        return Path(self.cache_dir) / self.category_groups_file

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
