from __future__ import annotations

from typing import Optional, Protocol

from .model import Session


class SessionRepository(Protocol):
    """Read-only access to sessions, always scoped by organization."""

    def get_by_id(self, *, org_id: int, session_id: int) -> Optional[Session]:
        raise NotImplementedError

    def find_by_public_code(self, *, org_id: int, public_code: str) -> Optional[Session]:
        """Case-insensitive lookup by the human-entered session code."""

        raise NotImplementedError

    def find_by_qr_token(self, *, org_id: int, event_qr_token: str) -> Optional[Session]:
        raise NotImplementedError

    def list_assigned_person_ids(self, *, session_id: int) -> frozenset[int]:
        raise NotImplementedError

    def list_assigned_group_ids(self, *, session_id: int) -> frozenset[int]:
        raise NotImplementedError
