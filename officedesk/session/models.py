"""
Session value object.

Built once at login from the office API's answer and carried in the bearer
token afterwards. Everything downstream (access resolver, list controllers,
KPI scoping) receives it explicitly instead of reading ambient state.
"""

import secrets
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    ADMIN = "admin"
    SUBADMIN = "subadmin"
    USER = "user"


def normalize_capability(name: str) -> str:
    """Capability names arrive with inconsistent casing from the API."""
    return " ".join(name.split()).casefold()


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default_factory=lambda: secrets.token_hex(16))
    role: Optional[Role] = None
    permissions: dict[str, int] = Field(default_factory=dict)
    employee_id: Optional[str] = None
    admin_id: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, v: Any):
        if v is None or v == "":
            return None
        if isinstance(v, Role):
            return v
        value = str(v).strip().lower()
        return value if value in {r.value for r in Role} else Role.USER

    @field_validator("permissions", mode="before")
    @classmethod
    def coerce_permissions(cls, v: Any):
        # Malformed maps degrade to "nothing granted"
        if not isinstance(v, dict):
            return {}
        clean: dict[str, int] = {}
        for key, value in v.items():
            if not isinstance(key, str) or not key.strip():
                continue
            granted = value is True or value == 1 or (
                isinstance(value, str) and value.strip().lower() in {"1", "true"}
            )
            clean[normalize_capability(key)] = 1 if granted else 0
        return clean

    @field_validator("employee_id", "admin_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any):
        if v is None or v == "":
            return None
        return str(v)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def has(self, capability: str) -> bool:
        return self.permissions.get(normalize_capability(capability), 0) == 1
