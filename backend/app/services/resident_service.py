"""
Barangay Portal — Resident Service
Orchestrates every resident operation in a fixed order:
authorization → existence → validation / address propagation → write → QR.
The acting principal is always passed in explicitly.
"""

from datetime import datetime, timezone

from app.config import get_settings
from app.core.errors import NotFoundError, ServerError
from app.models.auth import Principal
from app.models.resident import Resident, ResidentCreate, ResidentUpdate, ResidentWrite
from app.services.authorization import Operation, authorize
from app.services.family_address import resolve_address
from app.services.id_allocator import ResidentIdAllocator
from app.services.qr_service import QRCodeService
from app.services.resident_repository import DuplicateResidentIdError, ResidentRepository
from app.utils.logger import logger


RESIDENT_NOT_FOUND = "Resident not found"


def _editable_fields(data: ResidentWrite, address: str) -> dict:
    """Columns a create or update may set. Never resident_id or registration_date."""
    return {
        "first_name": data.first_name,
        "last_name": data.last_name,
        "gender": data.gender.value,
        "birth_date": data.birth_date.isoformat(),
        "address": address,
        "contact_number": data.contact_number,
        "family_head_id": data.family_head_id,
    }


class ResidentService:
    def __init__(self, repository: ResidentRepository):
        self.repository = repository
        self.allocator = ResidentIdAllocator(repository)
        self.qr = QRCodeService(repository)

    def _require(self, resident_id: str, include_qr: bool = False) -> Resident:
        resident = self.repository.get_resident(resident_id, include_qr=include_qr)
        if resident is None:
            raise NotFoundError(RESIDENT_NOT_FOUND)
        return resident

    async def list_residents(self, principal: Principal) -> list[Resident]:
        authorize(principal, None, Operation.LIST)
        residents = self.repository.list_residents()
        logger.info(f"📋 {principal.username} listed {len(residents)} residents")
        return residents

    async def get_resident(self, principal: Principal, resident_id: str) -> Resident:
        authorize(principal, resident_id, Operation.READ)
        resident = self._require(resident_id)
        logger.info(f"👤 {principal.username} fetched resident {resident_id}")
        return resident

    async def get_qr_code(self, principal: Principal, resident_id: str) -> str:
        authorize(principal, resident_id, Operation.QR)
        resident = self._require(resident_id, include_qr=True)
        qr_code = self.qr.get_or_create(resident)
        logger.info(f"🔳 {principal.username} fetched QR code for {resident_id}")
        return qr_code

    async def create_resident(self, principal: Principal, data: ResidentCreate) -> Resident:
        authorize(principal, None, Operation.CREATE)
        address = resolve_address(self.repository, data.family_head_id, data.address)

        row = _editable_fields(data, address)
        row["registration_date"] = datetime.now(timezone.utc).isoformat()

        max_attempts = get_settings().resident_id_max_attempts
        for attempt in range(max_attempts):
            row["resident_id"] = (
                self.allocator.next_id() if attempt == 0 else self.allocator.next_id_after_conflict()
            )
            try:
                resident = self.repository.insert_resident(row)
                break
            except DuplicateResidentIdError as e:
                logger.warning(f"⚠️ {e}; retrying allocation ({attempt + 1}/{max_attempts})")
        else:
            logger.error(f"❌ Could not allocate a resident ID after {max_attempts} attempts")
            raise ServerError()

        logger.info(f"✅ {principal.username} created resident {resident.resident_id}")

        try:
            self.qr.generate(resident)
        except ServerError:
            # Left without an artifact; the QR endpoint generates it later.
            logger.warning(f"⚠️ QR code deferred for resident {resident.resident_id}")

        return resident

    async def update_resident(
        self, principal: Principal, resident_id: str, data: ResidentUpdate
    ) -> Resident:
        authorize(principal, resident_id, Operation.UPDATE)
        current = self._require(resident_id)

        if data.family_head_id != current.family_head_id:
            logger.info(
                f"🔗 Resident {resident_id} family head: "
                f"{current.family_head_id or '-'} → {data.family_head_id or '-'}"
            )
        address = resolve_address(self.repository, data.family_head_id, data.address)

        updated = self.repository.update_resident(resident_id, _editable_fields(data, address))
        if updated is None:
            raise NotFoundError(RESIDENT_NOT_FOUND)
        logger.info(f"✏️ {principal.username} updated resident {resident_id}")
        return updated

    async def delete_resident(self, principal: Principal, resident_id: str) -> None:
        authorize(principal, resident_id, Operation.DELETE)
        self._require(resident_id)
        self.repository.delete_resident(resident_id)
        logger.info(f"🗑️ {principal.username} deleted resident {resident_id}")
