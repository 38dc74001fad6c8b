"""Client for the microlink metadata-unfurling API."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import requests

from ..errors import MetadataError
from ..logging import get_logger


class MicrolinkClient:
    def __init__(
        self,
        api_url: str = "https://api.microlink.io",
        *,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = int(timeout)
        self.log = get_logger("microlink")
        self.s = session or requests.Session()
        self.s.headers.update({"Accept": "application/json"})

    def fetch(self, url: str) -> Tuple[int, Any]:
        """Return (status_code, decoded JSON body) of a raw lookup.

        Raises MetadataError on network failure or a non-JSON body; the
        status code is not checked here.
        """
        try:
            r = self.s.get(self.api_url, params={"url": url}, timeout=self.timeout)
        except requests.RequestException as e:
            raise MetadataError(f"Metadata request failed for {url}: {e}") from e
        try:
            body = r.json()
        except ValueError as e:
            raise MetadataError(f"Metadata response for {url} is not JSON (HTTP {r.status_code})") from e
        return r.status_code, body

    def unfurl(self, url: str) -> Dict[str, str]:
        """Map a lookup to `{company, logo, title, description}`.

        Missing fields become empty strings.
        """
        status, body = self.fetch(url)
        data = lookup_data(status, body)
        if data is None:
            raise MetadataError(f"Metadata lookup for {url} failed (HTTP {status})")
        return company_fields(data)


def lookup_data(status: int, body: Any) -> Optional[Dict[str, Any]]:
    """Return the `data` object of a successful lookup, else None."""
    data = body.get("data") if isinstance(body, dict) else None
    if not 200 <= status < 300 or not isinstance(data, dict):
        return None
    return data


def company_fields(data: Dict[str, Any]) -> Dict[str, str]:
    image = data.get("image")
    logo = image.get("url") if isinstance(image, dict) else None
    return {
        "company": _text(data.get("publisher")),
        "logo": _text(logo),
        "title": _text(data.get("title")),
        "description": _text(data.get("description")),
    }


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""
