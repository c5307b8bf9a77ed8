# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

ADMIN_ROLE = "admin"


class AuthContext(BaseModel):
    """Dev auth context extracted from the ``X-User-Id`` and ``X-Role`` headers.

    Admins may trigger rollovers; their id is stamped on archived rows.
    """

    user_id: uuid.UUID
    role: str = "employee"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
