from __future__ import annotations

from typing import Dict, Iterator, Optional

from ..domain.models import CompanyInfo


class MetadataCache:
    """Session-scoped link -> CompanyInfo map.

    Entries are write-once: a later put for a known link keeps the first
    value. A new instance is a fresh session.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CompanyInfo] = {}

    def __contains__(self, link: object) -> bool:
        return link in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, link: str) -> Optional[CompanyInfo]:
        return self._entries.get(link)

    def put(self, link: str, info: CompanyInfo) -> CompanyInfo:
        """Store info for link unless present; return the stored entry."""
        return self._entries.setdefault(link, info)
