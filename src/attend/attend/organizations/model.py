from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Organization:
    """Tenant. Every other entity is scoped by `org_id`."""

    org_id: int
    slug: str
    name: str
