from __future__ import annotations

from typing import Optional, Protocol

from .model import SiteConfig


class SiteRepository(Protocol):
    def get_by_id(self, site_id: str) -> Optional[SiteConfig]:
        raise NotImplementedError
