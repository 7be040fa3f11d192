"""
Barangay Portal — Resident Repository
Supabase table access for residents and family heads.
`residents.resident_id` carries a unique index (see sql/schema.sql); a
conflicting insert surfaces as DuplicateResidentIdError.
"""

from typing import Any, Optional

from postgrest.exceptions import APIError

from app.config import get_settings
from app.core.errors import ServerError
from app.core.supabase_client import get_supabase_client
from app.models.resident import FamilyHead, Resident
from app.utils.logger import logger


UNIQUE_VIOLATION = "23505"

# Everything except the cached QR artifact
PUBLIC_COLUMNS = (
    "resident_id, first_name, last_name, gender, birth_date, address, "
    "contact_number, family_head_id, registration_date"
)


class DuplicateResidentIdError(Exception):
    """Insert collided with an existing resident_id."""

    def __init__(self, resident_id: str):
        super().__init__(f"Resident ID already taken: {resident_id}")
        self.resident_id = resident_id


class ResidentRepository:
    def __init__(self, client: Any = None):
        settings = get_settings()
        self.supabase = client if client is not None else get_supabase_client()
        self.residents_table = settings.residents_table
        self.family_heads_table = settings.family_heads_table

    def _residents(self):
        return self.supabase.table(self.residents_table)

    def _storage_failure(self, action: str, exc: Exception) -> ServerError:
        logger.error(f"❌ Storage failure while {action}: {exc}")
        return ServerError()

    # ──────────────────────────────────────────────────────────────
    # Residents
    # ──────────────────────────────────────────────────────────────

    def count_residents(self) -> int:
        try:
            response = self._residents().select("resident_id", count="exact").limit(1).execute()
        except APIError as e:
            raise self._storage_failure("counting residents", e)
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def max_resident_sequence(self, year: int) -> int:
        """Highest sequence issued for `year`, 0 if none.

        Compared numerically: R-20261000 sorts before R-2026999 as text.
        """
        prefix = f"{get_settings().resident_id_prefix}{year}"
        try:
            response = self._residents().select("resident_id").like("resident_id", f"{prefix}%").execute()
        except APIError as e:
            raise self._storage_failure(f"reading {year} resident sequences", e)
        sequences = [
            int(row["resident_id"][len(prefix):])
            for row in response.data or []
            if row["resident_id"][len(prefix):].isdigit()
        ]
        return max(sequences, default=0)

    def list_residents(self) -> list[Resident]:
        try:
            response = self._residents().select(PUBLIC_COLUMNS).order("resident_id").execute()
        except APIError as e:
            raise self._storage_failure("listing residents", e)
        return [Resident.model_validate(row) for row in response.data or []]

    def get_resident(self, resident_id: str, include_qr: bool = False) -> Optional[Resident]:
        columns = f"{PUBLIC_COLUMNS}, qr_code" if include_qr else PUBLIC_COLUMNS
        try:
            response = self._residents().select(columns).eq("resident_id", resident_id).limit(1).execute()
        except APIError as e:
            raise self._storage_failure(f"fetching resident {resident_id}", e)
        rows = response.data or []
        return Resident.model_validate(rows[0]) if rows else None

    def insert_resident(self, row: dict) -> Resident:
        try:
            response = self._residents().insert(row).execute()
        except APIError as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise DuplicateResidentIdError(row["resident_id"]) from e
            raise self._storage_failure(f"inserting resident {row.get('resident_id')}", e)
        rows = response.data or [row]
        return Resident.model_validate(rows[0])

    def update_resident(self, resident_id: str, fields: dict) -> Optional[Resident]:
        try:
            response = self._residents().update(fields).eq("resident_id", resident_id).execute()
        except APIError as e:
            raise self._storage_failure(f"updating resident {resident_id}", e)
        rows = response.data or []
        return Resident.model_validate(rows[0]) if rows else None

    def save_qr_code(self, resident_id: str, qr_code: str) -> None:
        try:
            self._residents().update({"qr_code": qr_code}).eq("resident_id", resident_id).execute()
        except APIError as e:
            raise self._storage_failure(f"saving QR code for {resident_id}", e)

    def delete_resident(self, resident_id: str) -> bool:
        try:
            response = self._residents().delete().eq("resident_id", resident_id).execute()
        except APIError as e:
            raise self._storage_failure(f"deleting resident {resident_id}", e)
        return bool(response.data)

    # ──────────────────────────────────────────────────────────────
    # Family heads (lookup only)
    # ──────────────────────────────────────────────────────────────

    def get_family_head(self, head_id: str) -> Optional[FamilyHead]:
        try:
            response = (
                self.supabase.table(self.family_heads_table)
                .select("head_id, first_name, last_name, address, contact_number")
                .eq("head_id", head_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise self._storage_failure(f"fetching family head {head_id}", e)
        rows = response.data or []
        return FamilyHead.model_validate(rows[0]) if rows else None


# Singleton
_repository = None

def get_resident_repository() -> ResidentRepository:
    global _repository
    if _repository is None:
        _repository = ResidentRepository()
    return _repository
