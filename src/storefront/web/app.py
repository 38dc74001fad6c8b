from __future__ import annotations

from typing import List, Optional

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from starlette.routing import Route

from ..clients.microlink import MicrolinkClient, company_fields, lookup_data
from ..clients.products import ProductSourceClient
from ..config import Settings, load_settings
from ..enrichment.cache import MetadataCache
from ..enrichment.service import StorefrontService
from ..domain.models import ProductDraft
from ..errors import MetadataError, ProductSourceError, ValidationError
from ..logging import get_logger
from .render import render_create_form, render_listing


LOG = get_logger("web")

CREATE_FAILED = "상품 추가에 실패했습니다"


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def build_service(settings: Settings, metadata: MicrolinkClient) -> StorefrontService:
    products = ProductSourceClient(settings.product_source_url, timeout=settings.http_timeout)
    return StorefrontService(
        products,
        metadata.unfurl,
        cache=MetadataCache(),
        max_workers=settings.enrich_workers,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    service: Optional[StorefrontService] = None,
    metadata_client: Optional[MicrolinkClient] = None,
    allow_origins: Optional[List[str]] = None,
) -> Starlette:
    """Create the storefront app: HTML pages plus JSON proxy endpoints.

    ``service`` and ``metadata_client`` are built from ``settings`` when not
    supplied. The service's cache lives as long as the app.
    """

    if settings is None and (service is None or metadata_client is None):
        settings = load_settings()
    if metadata_client is None:
        metadata_client = MicrolinkClient(settings.microlink_api_url, timeout=settings.http_timeout)
    if service is None:
        service = build_service(settings, metadata_client)

    async def health(_: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    async def link_metadata(request: Request) -> JSONResponse:
        try:
            body = await request.json()
            url = body.get("url") if isinstance(body, dict) else None
            if not url:
                return _error("URL is required", 400)
            status, payload = await run_in_threadpool(metadata_client.fetch, str(url))
            data = lookup_data(status, payload)
            if data is None:
                LOG.warning(f"Metadata lookup for {url} returned HTTP {status} without data")
                return _error("Failed to fetch metadata", 400)
            return JSONResponse(company_fields(data))
        except Exception as e:
            LOG.error(f"Metadata fetch error: {e}")
            return _error("Failed to fetch metadata", 500)

    async def link_preview(request: Request) -> JSONResponse:
        url = request.query_params.get("url")
        if not url:
            return _error("URL is required", 400)
        try:
            _, payload = await run_in_threadpool(metadata_client.fetch, url)
        except MetadataError as e:
            LOG.error(f"Link preview proxy error: {e}")
            return _error("Failed to fetch link preview", 500)
        return JSONResponse(payload)

    async def list_products(_: Request) -> JSONResponse:
        views = await run_in_threadpool(service.list_products)
        return JSONResponse({"products": [v.to_json() for v in views]})

    async def add_product(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            return _error("Invalid JSON body", 400)
        if not isinstance(body, dict):
            return _error("Invalid JSON body", 400)
        try:
            draft = ProductDraft.from_form(body)
        except ValidationError as e:
            return _error(str(e), 400)
        try:
            await run_in_threadpool(service.create_product, draft)
        except ProductSourceError as e:
            LOG.error(f"Create product failed: {e}")
            return _error(CREATE_FAILED, 502)
        return JSONResponse({"ok": True}, status_code=201)

    async def home(request: Request) -> Response:
        if request.query_params.get("refresh") == "true":
            return RedirectResponse("/", status_code=303)
        views = await run_in_threadpool(service.list_products)
        return HTMLResponse(render_listing(views))

    async def create_form(_: Request) -> HTMLResponse:
        return HTMLResponse(render_create_form())

    async def create_submit(request: Request) -> Response:
        form = await request.form()
        values = {k: str(v) for k, v in form.items()}
        try:
            draft = ProductDraft.from_form(values)
        except ValidationError as e:
            return HTMLResponse(render_create_form(values, error=str(e)), status_code=400)
        try:
            await run_in_threadpool(service.create_product, draft)
        except ProductSourceError as e:
            LOG.error(f"Create product failed: {e}")
            return HTMLResponse(render_create_form(values, error=CREATE_FAILED), status_code=502)
        return RedirectResponse("/?refresh=true", status_code=303)

    routes = [
        Route("/api/health", health, methods=["GET"]),
        Route("/api/link-metadata", link_metadata, methods=["POST"]),
        Route("/api/link-preview", link_preview, methods=["GET"]),
        Route("/api/products", list_products, methods=["GET"]),
        Route("/api/products", add_product, methods=["POST"]),
        Route("/", home, methods=["GET"]),
        Route("/create", create_form, methods=["GET"]),
        Route("/create", create_submit, methods=["POST"]),
    ]

    app = Starlette(debug=False, routes=routes)
    app.state.service = service

    origins = allow_origins or ["http://localhost:3000", "http://127.0.0.1:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if "*" in origins else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


__all__ = ["create_app", "build_service"]
