from pydantic import BaseModel, Field, field_validator
from typing import List

from officedesk.rbac import ALL_CAPABILITIES
from officedesk.session import normalize_capability

_KNOWN = {normalize_capability(c): c for c in ALL_CAPABILITIES}


class RegisterSubadminRequest(BaseModel):
    """POST /useraccess — grant an employee a sub-admin login."""

    employee_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)
    permissions: List[str] = Field(..., min_length=1)

    @field_validator("permissions")
    @classmethod
    def known_capabilities(cls, v: List[str]) -> List[str]:
        # Canonical spelling, duplicates dropped
        resolved = []
        for name in v:
            canonical = _KNOWN.get(normalize_capability(name))
            if canonical is None:
                raise ValueError(f"Unknown permission: {name}")
            if canonical not in resolved:
                resolved.append(canonical)
        return resolved
