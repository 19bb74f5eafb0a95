from __future__ import annotations

from typing import Optional, Protocol

from .model import Organization


class OrganizationRepository(Protocol):
    def get_by_slug(self, slug: str) -> Optional[Organization]:
        raise NotImplementedError
