# Models module
from app.models.auth import Principal, ADMIN_ROLE, RESIDENT_ROLE
from app.models.resident import (
    Gender, ResidentWrite, ResidentCreate, ResidentUpdate, Resident,
    FamilyHead, QRClaim, QRCodeResponse, MessageResponse,
)
