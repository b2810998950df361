# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class AuthContext(BaseModel):
    """Caller identity forwarded by the upstream auth proxy in request headers."""

    user_id: uuid.UUID
    role: str = "employee"

    @property
    def is_hr(self) -> bool:
        return self.role in ("hr", "admin")
