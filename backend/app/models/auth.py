"""
Barangay Portal — Pydantic Models for Authenticated Principals
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


ADMIN_ROLE = "admin"
RESIDENT_ROLE = "resident"


class Principal(BaseModel):
    """The authenticated actor behind a request.

    Built from a bearer token and passed explicitly into every resident
    operation. `resident_id` is only present for resident-role principals.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    username: str
    role: str
    resident_id: Optional[str] = Field(None, alias="residentId")

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
