# backend/catalog/gateway.py
"""
Catalog Gateway: the three catalog lookups the stack builder needs.

- products for a category (by type ids), cached for a short staleness window
- one product with extended detail fields
- relationship-only rows for a set of product ids

Every call either returns normalized Products or raises UpstreamUnavailable /
UpstreamDataError. An empty list means the catalog genuinely had nothing.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..errors import UpstreamDataError
from ..log import get_logger
from . import queries
from .client import run_query
from .models import Product, normalize_product

logger = get_logger(__name__)

CacheKey = Tuple[Tuple[str, ...], int]


class CatalogCache:
    """Category listings keyed by (type ids, limit), kept for `ttl` seconds."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, List[Product]]] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[List[Product]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            ts, products = entry
            if self._clock() - ts >= self.ttl:
                del self._entries[key]
                return None
            return list(products)

    def put(self, key: CacheKey, products: List[Product]) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), list(products))


_cache: Optional[CatalogCache] = None


def get_cache() -> CatalogCache:
    global _cache
    if _cache is None:
        _cache = CatalogCache(ttl=get_settings().CATALOG_CACHE_TTL)
    return _cache


def _normalize_rows(data: Dict[str, Any]) -> List[Product]:
    rows = data.get("products")
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise UpstreamDataError("Catalog field 'products' is not a list")

    products: List[Product] = []
    for row in rows:
        if not isinstance(row, dict):
            raise UpstreamDataError("Catalog product row is not an object")
        try:
            products.append(normalize_product(row))
        except (ValueError, ValidationError) as e:
            raise UpstreamDataError(f"Malformed product row: {e}") from e
    return products


def _clean_ids(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(str(i).strip() for i in ids if i and str(i).strip()))


def fetch_products(
    product_type_ids: Sequence[str],
    limit: Optional[int] = None,
    client: Optional[httpx.Client] = None,
    use_cache: bool = True,
) -> List[Product]:
    """Products matching any of the given type ids, in catalog order."""
    type_ids = _clean_ids(product_type_ids)
    if not type_ids:
        raise ValueError("at least one product type id is required")
    limit = limit or get_settings().CATALOG_DEFAULT_LIMIT

    key: CacheKey = (tuple(type_ids), limit)
    cache = get_cache()
    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Catalog cache hit for types={','.join(type_ids)} limit={limit}")
            return cached

    data = run_query(
        queries.PRODUCTS_BY_TYPE,
        {"productTypeIds": type_ids, "limit": limit},
        client=client,
    )
    products = _normalize_rows(data)
    logger.info(f"Fetched {len(products)} products for types={','.join(type_ids)}")

    if use_cache:
        cache.put(key, products)
    return products


def fetch_product(product_id: str, client: Optional[httpx.Client] = None) -> Optional[Product]:
    """One product with detail fields, or None when the id is unknown."""
    if not product_id:
        raise ValueError("product id is required")
    data = run_query(queries.PRODUCT_DETAILS, {"productId": product_id}, client=client)
    products = _normalize_rows(data)
    if not products:
        logger.info(f"Product {product_id} not found")
        return None
    return products[0]


def fetch_relationships(
    product_ids: Sequence[str],
    client: Optional[httpx.Client] = None,
) -> List[Product]:
    """
    Relationship rows (deployments, assets, supported products) for the ids.
    Rows come back in the order the ids were given; unknown ids are dropped.
    """
    ids = _clean_ids(product_ids)
    if not ids:
        return []
    data = run_query(queries.PRODUCT_RELATIONSHIPS, {"productIds": ids}, client=client)
    by_id = {p.id: p for p in _normalize_rows(data)}
    missing = [i for i in ids if i not in by_id]
    if missing:
        logger.info(f"Relationship lookup missed {len(missing)} id(s): {missing}")
    return [by_id[i] for i in ids if i in by_id]
