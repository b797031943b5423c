from __future__ import annotations

from typing import Dict, Iterable, Optional

from .model import SiteConfig
from .repository import SiteRepository


class InMemorySiteRepository(SiteRepository):
    def __init__(self, sites: Iterable[SiteConfig] = ()):
        self._by_id: Dict[str, SiteConfig] = {s.site_id: s for s in sites}

    def get_by_id(self, site_id: str) -> Optional[SiteConfig]:
        return self._by_id.get(site_id)

    def put(self, site: SiteConfig) -> None:
        self._by_id[site.site_id] = site
