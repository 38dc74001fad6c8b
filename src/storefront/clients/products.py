from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..domain.models import Product, ProductDraft
from ..errors import ProductSourceError
from ..logging import get_logger


class ProductSourceClient:
    """Thin client for the product source REST endpoint.

    Only two calls exist: list all products and create one.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = base_url.rstrip("/")
        self.timeout = int(timeout)
        self.log = get_logger("product-source")
        self.s = session or requests.Session()
        self.s.headers.update({"Accept": "application/json"})

    def _json(self, r: requests.Response) -> Any:
        if not r.ok:
            raise ProductSourceError(f"HTTP {r.status_code} from product source", status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise ProductSourceError(f"Product source returned invalid JSON: {e}", status_code=r.status_code) from e

    def list_products(self) -> List[Product]:
        try:
            r = self.s.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            self.log.error(f"GET products failed: {e}")
            raise ProductSourceError(f"Product source unreachable: {e}") from e
        body = self._json(r)
        raw_items = body.get("products") if isinstance(body, dict) else None
        if not isinstance(raw_items, list):
            self.log.warning("Product source response has no 'products' list; treating as empty")
            return []
        products: List[Product] = []
        for item in raw_items:
            if not isinstance(item, dict):
                self.log.warning(f"Skipping non-object product entry: {item!r}")
                continue
            try:
                products.append(Product.from_json(item))
            except ValueError as e:
                self.log.warning(f"Skipping malformed product: {e}")
        self.log.info(f"Fetched {len(products)} product(s)")
        return products

    def create_product(self, draft: ProductDraft) -> Dict[str, Any]:
        payload = draft.to_json()
        self.log.info(f"POST product: name={draft.name!r}, price={draft.price}, seller={draft.seller!r}")
        try:
            r = self.s.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            self.log.error(f"POST product failed: {e}")
            raise ProductSourceError(f"Product source unreachable: {e}") from e
        if not r.ok:
            self.log.error(f"POST product rejected with HTTP {r.status_code}")
            raise ProductSourceError(f"HTTP {r.status_code} from product source", status_code=r.status_code)
        try:
            body = r.json()
        except ValueError:
            body = None
        return {"status_code": r.status_code, "json": body}
