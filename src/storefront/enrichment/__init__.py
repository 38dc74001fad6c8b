from .cache import MetadataCache
from .service import (
    StorefrontService,
    attach_links,
    enrich,
    fetch_company_metadata,
    populate_cache,
)

__all__ = [
    "MetadataCache",
    "StorefrontService",
    "attach_links",
    "enrich",
    "fetch_company_metadata",
    "populate_cache",
]
