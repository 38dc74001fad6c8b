from __future__ import annotations

import threading
import time

from storefront.clients.microlink import MicrolinkClient
from storefront.domain.links import CANDIDATE_LINKS, derive_link
from storefront.domain.models import DEFAULT_COMPANY_INFO, CompanyInfo, Product
from storefront.enrichment import (
    MetadataCache,
    StorefrontService,
    attach_links,
    enrich,
    fetch_company_metadata,
    populate_cache,
)
from storefront.errors import MetadataError, ProductSourceError


def _products(count: int):
    return [
        Product(id=i + 1, name=f"상품{i + 1}", price=1000 * (i + 1), seller="판매처", image_url="")
        for i in range(count)
    ]


class _StubProducts:
    def __init__(self, products=None, error=None):
        self._products = products or []
        self._error = error
        self.created = []

    def list_products(self):
        if self._error:
            raise self._error
        return list(self._products)

    def create_product(self, draft):
        self.created.append(draft)
        return {"status_code": 201, "json": None}


def test_scenario_successful_lookup_maps_publisher_logo_title(fake_session, fake_response):
    session = fake_session(
        fake_response(200, {"data": {"title": "바지", "publisher": "나이키스토어", "image": {"url": "logo.png"}}})
    )
    client = MicrolinkClient(session=session)
    products = attach_links([Product(id=1, name="바지", price=10000, seller="나이키", image_url="x")])
    assert products[0].link == CANDIDATE_LINKS[0]

    info = fetch_company_metadata(products[0].link, client.unfurl)

    assert info == CompanyInfo(company="나이키스토어", logo="logo.png", title="바지", description="")
    assert session.calls[0]["params"] == {"url": CANDIDATE_LINKS[0]}


def test_scenario_http_500_yields_exact_default(fake_session, fake_response):
    client = MicrolinkClient(session=fake_session(fake_response(500, {"status": "error"})))
    info = fetch_company_metadata(derive_link(0), client.unfurl)
    assert info == CompanyInfo(company="판매자", logo="", title="", description="")


def test_malformed_and_failing_fetches_yield_default(fake_session, fake_response, connection_error):
    cases = [
        fake_response(200, {"status": "success"}),
        fake_response(200, {"data": "not-an-object"}),
        fake_response(200, ["unexpected"]),
        fake_response(200, invalid_json=True),
        connection_error,
    ]
    for case in cases:
        client = MicrolinkClient(session=fake_session(case))
        assert fetch_company_metadata("https://example.com", client.unfurl) == DEFAULT_COMPANY_INFO


def test_missing_publisher_falls_back_to_default_company():
    info = fetch_company_metadata("u", lambda _: {"company": "", "logo": None, "title": "t"})
    assert info == CompanyInfo(company="판매자", logo="", title="t", description="")


def test_non_mapping_fetch_result_yields_default():
    assert fetch_company_metadata("u", lambda _: None) == DEFAULT_COMPANY_INFO


def test_shared_link_fetched_once_and_views_match(counting_fetcher):
    fetcher = counting_fetcher(default={"company": "무신사", "logo": "m.png", "title": "셔츠", "description": ""})
    products = attach_links(_products(len(CANDIDATE_LINKS) + 1))
    cache = MetadataCache()

    views = enrich(products, cache, fetcher, max_workers=4)

    assert sorted(fetcher.calls) == sorted(CANDIDATE_LINKS)
    assert len(cache) == len(CANDIDATE_LINKS)
    first, last = views[0], views[-1]
    assert first.link == last.link
    assert (first.company, first.logo, first.title) == (last.company, last.logo, last.title)


def test_sequential_mode_fetches_in_first_seen_order(counting_fetcher):
    fetcher = counting_fetcher(default={"company": "c"})
    products = attach_links(_products(5))
    populate_cache(products, MetadataCache(), fetcher, max_workers=1)
    assert fetcher.calls == list(CANDIDATE_LINKS)


def test_cached_links_are_not_refetched_or_mutated(counting_fetcher):
    cache = MetadataCache()
    original = CompanyInfo("원래", "", "", "")
    cache.put(CANDIDATE_LINKS[0], original)
    fetcher = counting_fetcher(default={"company": "바뀜"})
    products = attach_links(_products(len(CANDIDATE_LINKS)))

    assert populate_cache(products, cache, fetcher) == len(CANDIDATE_LINKS) - 1
    assert CANDIDATE_LINKS[0] not in fetcher.calls

    calls_before = list(fetcher.calls)
    assert populate_cache(products, cache, fetcher) == 0
    assert fetcher.calls == calls_before
    assert cache.get(CANDIDATE_LINKS[0]) is original


def test_cache_put_is_write_once():
    cache = MetadataCache()
    first = CompanyInfo("a", "", "", "")
    assert cache.put("link", first) is first
    assert cache.put("link", CompanyInfo("b", "", "", "")) is first
    assert len(cache) == 1
    assert list(cache) == ["link"]


def test_failed_lookup_is_cached_as_default(counting_fetcher):
    fetcher = counting_fetcher(default=MetadataError("boom"))
    cache = MetadataCache()
    views = enrich(attach_links(_products(1)), cache, fetcher)
    assert cache.get(CANDIDATE_LINKS[0]) == DEFAULT_COMPANY_INFO
    assert views[0].company == "판매처"
    assert views[0].title == "상품1"


def test_service_returns_empty_list_when_product_source_fails(counting_fetcher):
    fetcher = counting_fetcher()
    svc = StorefrontService(_StubProducts(error=ProductSourceError("down")), fetcher)
    assert svc.list_products() == []
    assert fetcher.calls == []


def test_service_keeps_cache_across_refreshes(counting_fetcher):
    fetcher = counting_fetcher(default={"company": "c", "title": "t"})
    svc = StorefrontService(_StubProducts(_products(3)), fetcher, max_workers=2)

    first = svc.list_products()
    second = svc.list_products()

    assert len(fetcher.calls) == len(set(CANDIDATE_LINKS))
    assert [v.to_json() for v in first] == [v.to_json() for v in second]


def test_service_lookup_goes_through_cache(counting_fetcher):
    fetcher = counting_fetcher(default={"company": "c"})
    svc = StorefrontService(_StubProducts(), fetcher)
    assert svc.lookup("u") == svc.lookup("u")
    assert fetcher.calls == ["u"]


def test_concurrent_listings_fetch_each_link_once(counting_fetcher):
    slow = counting_fetcher(default={"company": "c"})

    def fetcher(url):
        time.sleep(0.05)
        return slow(url)

    svc = StorefrontService(_StubProducts(_products(4)), fetcher, max_workers=2)
    results = []
    threads = [threading.Thread(target=lambda: results.append(svc.list_products())) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 4
    assert sorted(slow.calls) == sorted(CANDIDATE_LINKS)
    assert all(len(views) == 4 for views in results)
