"""Server-side HTML for the listing and product-creation pages."""

from __future__ import annotations

from html import escape
from typing import Mapping, Optional, Sequence

from ..domain.links import company_initial
from ..domain.models import ProductView

BRAND = "아마따"
PLACEHOLDER_IMAGE = "/placeholder.svg"

_PAGE = """<!doctype html>
<html lang="ko">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def _page(title: str, body: str) -> str:
    return _PAGE.format(title=escape(title), body=body)


def _product_card(view: ProductView) -> str:
    image = escape(view.image_url or PLACEHOLDER_IMAGE)
    if view.logo:
        badge = f'<img class="og-image" src="{escape(view.logo)}" alt="og-image">'
    else:
        badge = f'<span class="company-badge">{escape(company_initial(view.company))}</span>'
    description = ""
    if view.description:
        description = f"<span> · </span><span>{escape(view.description)}</span>"
    return (
        f'<li class="product" data-id="{view.id}">'
        f'<img class="product-image" src="{image}" alt="{escape(view.name)}">'
        f"<h3>{escape(view.name)}</h3>"
        f'<a class="og-info" href="{escape(view.link)}" target="_blank" rel="noopener noreferrer">'
        f'{badge}<p><span class="og-title">{escape(view.title)}</span>{description}</p>'
        f"</a>"
        f'<span class="price">{escape(view.price_label)}</span>'
        f"</li>"
    )


def render_listing(views: Sequence[ProductView]) -> str:
    if views:
        items = "\n".join(_product_card(v) for v in views)
        content = f'<ul class="products">\n{items}\n</ul>'
    else:
        content = '<p class="empty">상품이 없습니다</p>'
    body = (
        f"<header><h1>{BRAND}</h1></header>\n"
        f"<main>\n{content}\n</main>\n"
        '<a class="fab-button" href="/create" aria-label="Add new product">+</a>'
    )
    return _page(BRAND, body)


_FIELDS = (
    ("name", "상품명 *", "text", "상품명을 입력하세요", True),
    ("price", "가격 (원) *", "number", "가격을 입력하세요", True),
    ("seller", "판매자 *", "text", "판매자명을 입력하세요", True),
    ("imageUrl", "이미지 URL", "text", "이미지 URL을 입력하세요", False),
)


def render_create_form(values: Optional[Mapping[str, str]] = None, error: Optional[str] = None) -> str:
    values = values or {}
    rows = []
    for name, label, kind, placeholder, required in _FIELDS:
        value = escape(str(values.get(name) or ""))
        req = " required" if required else ""
        rows.append(
            f'<div><label for="{name}">{escape(label)}</label>'
            f'<input id="{name}" type="{kind}" name="{name}" value="{value}" '
            f'placeholder="{escape(placeholder)}"{req}></div>'
        )
    image_url = values.get("imageUrl")
    if image_url:
        rows.append(f'<div class="preview"><img src="{escape(image_url)}" alt="Preview"></div>')
    error_html = f'<div class="error">{escape(error)}</div>\n' if error else ""
    body = (
        '<header><a href="/" aria-label="Go back">&larr;</a><h1>상품 추가</h1></header>\n'
        '<main><form method="post" action="/create">\n'
        f"{error_html}"
        + "\n".join(rows)
        + '\n<button type="submit">상품 추가</button>\n</form></main>'
    )
    return _page("상품 추가", body)
