from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Organization
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_slug(self, slug: str) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT org_id, slug, name FROM organizations WHERE slug=%s", (slug,))
            r = fetchone(cur)
            if not r:
                return None
            return Organization(org_id=int(r["org_id"]), slug=r["slug"], name=r["name"])
