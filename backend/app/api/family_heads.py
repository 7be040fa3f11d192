"""
Barangay Portal — Family Heads API Router
Read-only lookup used by profile pages to show a resident's household.
"""

from fastapi import APIRouter, Depends

from app.api.auth import get_current_principal
from app.core.errors import NotFoundError
from app.models.auth import Principal
from app.models.resident import FamilyHead
from app.services.resident_repository import ResidentRepository, get_resident_repository

router = APIRouter()


@router.get("/{head_id}", response_model=FamilyHead)
async def get_family_head(
    head_id: str,
    principal: Principal = Depends(get_current_principal),
    repository: ResidentRepository = Depends(get_resident_repository),
):
    head = repository.get_family_head(head_id)
    if head is None:
        raise NotFoundError("Family head not found")
    return head
