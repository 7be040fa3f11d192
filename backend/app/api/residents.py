"""
Barangay Portal — Residents API Router
CRUD over resident records plus the QR identity artifact.
The cached QR code only ever leaves through /{id}/qrcode.
"""

from fastapi import APIRouter, Depends, status

from app.api.auth import get_current_principal
from app.models.auth import Principal
from app.models.resident import (
    MessageResponse, QRCodeResponse, Resident, ResidentCreate, ResidentUpdate,
)
from app.services.resident_repository import ResidentRepository, get_resident_repository
from app.services.resident_service import ResidentService

router = APIRouter()


def get_resident_service(
    repository: ResidentRepository = Depends(get_resident_repository),
) -> ResidentService:
    return ResidentService(repository)


@router.get("", response_model=list[Resident])
async def list_residents(
    principal: Principal = Depends(get_current_principal),
    service: ResidentService = Depends(get_resident_service),
):
    """All residents (admin only)."""
    return await service.list_residents(principal)


@router.get("/{resident_id}", response_model=Resident)
async def get_resident(
    resident_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ResidentService = Depends(get_resident_service),
):
    return await service.get_resident(principal, resident_id)


@router.get("/{resident_id}/qrcode", response_model=QRCodeResponse)
async def get_resident_qr_code(
    resident_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ResidentService = Depends(get_resident_service),
):
    """QR identity artifact, generated on first request."""
    qr_code = await service.get_qr_code(principal, resident_id)
    return QRCodeResponse(qr_code=qr_code)


@router.post("", response_model=Resident, status_code=status.HTTP_201_CREATED)
async def create_resident(
    body: ResidentCreate,
    principal: Principal = Depends(get_current_principal),
    service: ResidentService = Depends(get_resident_service),
):
    """Register a resident (admin only)."""
    return await service.create_resident(principal, body)


@router.put("/{resident_id}", response_model=Resident)
async def update_resident(
    resident_id: str,
    body: ResidentUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ResidentService = Depends(get_resident_service),
):
    return await service.update_resident(principal, resident_id, body)


@router.delete("/{resident_id}", response_model=MessageResponse)
async def delete_resident(
    resident_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ResidentService = Depends(get_resident_service),
):
    await service.delete_resident(principal, resident_id)
    return MessageResponse(message="Resident deleted successfully")
