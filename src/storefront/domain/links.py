"""Seller-link helpers for product display."""

from __future__ import annotations

import re
from typing import Optional, Tuple
from urllib.parse import unquote_plus

# Stub rotation: products do not carry their own seller link yet, so each
# product index is mapped onto one of these URLs until real data exists.
CANDIDATE_LINKS: Tuple[str, ...] = (
    "https://brand.naver.com/atez/products/12410254221?NaPm=ct%3Dmkdf1llc%7Cci%3D26ac4a334957f5d4ea7eb5ca22ae315f3e2f82a1%7Ctr%3Dslslsp%7Csn%3D12125186%7Chk%3D060849b8d067cd7e9023fd63fbd96cd28d2fad18&nl-au=3c06864a95844a4db31bb084ca377fda&nl-query=%EB%B0%94%EC%A7%80",
    "https://www.musinsa.com/products/2307747?srsltid=AfmBOoqKAzPzX8JoR8YSJ-ocqwsEIlM8m57BWizWgqv2wjDqBwBkpXYo-zo",
)

FALLBACK_COMPANY = "판매자"
FALLBACK_TITLE = "상품"

_COUPANG_QUERY = re.compile(r"[?&]q=([^&]+)")
_NAVER_QUERY = re.compile(r"[?&]query=([^&]+)")


def derive_link(index: int) -> str:
    return CANDIDATE_LINKS[index % len(CANDIDATE_LINKS)]


def product_title_from_link(link: Optional[str], product_name: Optional[str] = None) -> str:
    """Return the search term embedded in a marketplace link, else the product name.

    Coupang search links carry it in `q`, Naver in `query`.
    """
    fallback = product_name or FALLBACK_TITLE
    if not link:
        return fallback
    pattern = None
    if "coupang" in link:
        pattern = _COUPANG_QUERY
    elif "naver" in link:
        pattern = _NAVER_QUERY
    if pattern is not None:
        m = pattern.search(link)
        if m:
            return unquote_plus(m.group(1))
    return fallback


def company_name(company: Optional[str] = None, seller: Optional[str] = None) -> str:
    return company or seller or FALLBACK_COMPANY


def company_initial(company: str) -> str:
    return company[:1]
