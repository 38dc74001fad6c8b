from .links import (
    CANDIDATE_LINKS,
    company_initial,
    company_name,
    derive_link,
    product_title_from_link,
)
from .models import (
    DEFAULT_COMPANY_INFO,
    CompanyInfo,
    Product,
    ProductDraft,
    ProductView,
    build_view,
    format_price,
)

__all__ = [
    "CANDIDATE_LINKS",
    "DEFAULT_COMPANY_INFO",
    "CompanyInfo",
    "Product",
    "ProductDraft",
    "ProductView",
    "build_view",
    "company_initial",
    "company_name",
    "derive_link",
    "format_price",
    "product_title_from_link",
]
