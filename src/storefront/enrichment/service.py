"""Product enrichment: attach seller links and fetch their metadata."""

from __future__ import annotations

import concurrent.futures
import threading
from dataclasses import replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..clients.products import ProductSourceClient
from ..domain.links import derive_link
from ..domain.models import DEFAULT_COMPANY_INFO, CompanyInfo, Product, ProductDraft, ProductView, build_view
from ..errors import ProductSourceError
from ..logging import get_logger
from .cache import MetadataCache

LOG = get_logger("enrichment")

MetadataFetcher = Callable[[str], Mapping[str, Any]]


def fetch_company_metadata(url: str, fetcher: MetadataFetcher) -> CompanyInfo:
    """Best-effort lookup. Any failure yields the default record."""
    try:
        data = fetcher(url)
        if not isinstance(data, Mapping):
            raise TypeError(f"unexpected metadata payload type {type(data).__name__}")
        return CompanyInfo(
            company=_text(data.get("company")) or DEFAULT_COMPANY_INFO.company,
            logo=_text(data.get("logo")),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
        )
    except Exception as e:
        LOG.warning(f"Failed to fetch company metadata for {url}: {e}")
    return DEFAULT_COMPANY_INFO


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def attach_links(products: Sequence[Product]) -> List[Product]:
    return [replace(p, link=derive_link(i)) for i, p in enumerate(products)]


def _pending_links(products: Sequence[Product], cache: MetadataCache) -> List[str]:
    seen = set()
    pending: List[str] = []
    for p in products:
        if not p.link or p.link in seen or p.link in cache:
            continue
        seen.add(p.link)
        pending.append(p.link)
    return pending


def populate_cache(
    products: Sequence[Product],
    cache: MetadataCache,
    fetcher: MetadataFetcher,
    *,
    max_workers: int = 4,
) -> int:
    """Fetch metadata for every distinct uncached link; return fetch count.

    Fetches fan out over at most ``max_workers`` threads (1 runs them in
    order); results are written by the calling thread. Callers sharing a
    cache across threads must serialize calls (see StorefrontService).
    """
    pending = _pending_links(products, cache)
    if not pending:
        LOG.debug("All links already cached; nothing to fetch")
        return 0
    LOG.info(f"Fetching metadata for {len(pending)} link(s) with {max_workers} worker(s)")

    if max_workers <= 1:
        for link in pending:
            cache.put(link, fetch_company_metadata(link, fetcher))
        return len(pending)

    with concurrent.futures.ThreadPoolExecutor(max_workers=min(max_workers, len(pending))) as executor:
        future_to_link = {
            executor.submit(fetch_company_metadata, link, fetcher): link
            for link in pending
        }
        for future in concurrent.futures.as_completed(future_to_link):
            cache.put(future_to_link[future], future.result())
    return len(pending)


def enrich(
    products: Sequence[Product],
    cache: MetadataCache,
    fetcher: MetadataFetcher,
    *,
    max_workers: int = 4,
) -> List[ProductView]:
    """Populate the cache for ``products`` and merge entries into views."""
    populate_cache(products, cache, fetcher, max_workers=max_workers)
    return [build_view(p, cache.get(p.link) if p.link else None) for p in products]


class StorefrontService:
    """Coordinates the product source, metadata lookups and the session cache."""

    def __init__(
        self,
        products: ProductSourceClient,
        fetcher: MetadataFetcher,
        *,
        cache: Optional[MetadataCache] = None,
        max_workers: int = 4,
    ) -> None:
        self.products = products
        self.fetcher = fetcher
        self.cache = cache if cache is not None else MetadataCache()
        self.max_workers = max(1, int(max_workers))
        # concurrent requests share one cache; one pass at a time
        self._lock = threading.Lock()

    def list_products(self) -> List[ProductView]:
        """Fetch and enrich the product list.

        A product source failure is logged and yields an empty list.
        """
        try:
            raw = self.products.list_products()
        except ProductSourceError as e:
            LOG.error(f"Failed to fetch products: {e}")
            return []
        with self._lock:
            return enrich(attach_links(raw), self.cache, self.fetcher, max_workers=self.max_workers)

    def create_product(self, draft: ProductDraft) -> Dict[str, Any]:
        result = self.products.create_product(draft)
        LOG.info(f"Created product {draft.name!r} (HTTP {result['status_code']})")
        return result

    def lookup(self, url: str) -> CompanyInfo:
        """Single-link lookup through the session cache."""
        with self._lock:
            cached = self.cache.get(url)
            if cached is not None:
                return cached
            return self.cache.put(url, fetch_company_metadata(url, self.fetcher))
