from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Sequence

from ..clients.microlink import MicrolinkClient
from ..config import load_settings
from ..domain.models import ProductDraft
from ..enrichment.service import fetch_company_metadata
from ..errors import ProductSourceError, ValidationError
from ..logging import configure_logging, get_logger
from ..web.app import build_service

LOG = get_logger("cli-main")


def _add_serve(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    serve = subparsers.add_parser("serve", help="Run the storefront web app.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--log-level", default="info")
    serve.add_argument(
        "--allow-origin",
        action="append",
        dest="allow_origins",
        help="Allowed CORS origin (can be provided multiple times, use '*' for any).",
    )

    def _serve(ns: argparse.Namespace) -> int:
        from ..web.app import create_app
        import uvicorn

        configure_logging(ns.log_level)
        app = create_app(load_settings(os.getcwd()), allow_origins=ns.allow_origins)
        uvicorn.run(app, host=ns.host, port=ns.port, log_level=ns.log_level)
        return 0

    serve.set_defaults(handler=_serve)


def main(argv: Sequence[str] | None = None) -> int:
    provided = list(argv) if argv is not None else sys.argv[1:]
    LOG.debug(f"CLI invoked with arguments: {provided}")

    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Product listing with link-preview enrichment.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_serve(subparsers)

    products_cmd = subparsers.add_parser("products", help="Print the enriched product list as JSON.")
    products_cmd.add_argument("--workers", type=int, help="Override ENRICH_WORKERS")

    def _products(ns: argparse.Namespace) -> int:
        settings = load_settings(os.getcwd())
        if ns.workers:
            settings.enrich_workers = ns.workers
        svc = build_service(settings, MicrolinkClient(settings.microlink_api_url, timeout=settings.http_timeout))
        views = svc.list_products()
        print(json.dumps({"products": [v.to_json() for v in views]}, ensure_ascii=False, indent=2))
        return 0

    products_cmd.set_defaults(handler=_products)

    unfurl_cmd = subparsers.add_parser("unfurl", help="Look up link metadata for a single URL.")
    unfurl_cmd.add_argument("--url", required=True)

    def _unfurl(ns: argparse.Namespace) -> int:
        settings = load_settings(os.getcwd())
        client = MicrolinkClient(settings.microlink_api_url, timeout=settings.http_timeout)
        info = fetch_company_metadata(ns.url, client.unfurl)
        print(json.dumps(info.to_dict(), ensure_ascii=False))
        return 0

    unfurl_cmd.set_defaults(handler=_unfurl)

    add_cmd = subparsers.add_parser("add", help="Create a product at the product source.")
    add_cmd.add_argument("--name", required=True)
    add_cmd.add_argument("--price", required=True)
    add_cmd.add_argument("--seller", required=True)
    add_cmd.add_argument("--image-url", default="")

    def _add(ns: argparse.Namespace) -> int:
        try:
            draft = ProductDraft.from_form(
                {"name": ns.name, "price": ns.price, "seller": ns.seller, "imageUrl": ns.image_url}
            )
        except ValidationError as e:
            LOG.error(str(e))
            return 2
        settings = load_settings(os.getcwd())
        svc = build_service(settings, MicrolinkClient(settings.microlink_api_url, timeout=settings.http_timeout))
        try:
            result = svc.create_product(draft)
        except ProductSourceError as e:
            LOG.error(f"상품 추가에 실패했습니다: {e}")
            return 1
        print(json.dumps(result, ensure_ascii=False))
        return 0

    add_cmd.set_defaults(handler=_add)

    args = parser.parse_args(provided)
    code = args.handler(args)
    LOG.info(f"Subcommand '{args.command}' finished with exit code {code}.")
    return code


if __name__ == "__main__":
    sys.exit(main())
