import os

# Must be set before app.main builds its middleware from settings
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "100000")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from app.core.errors import ServerError
from app.models.auth import Principal
from app.models.resident import FamilyHead, Resident, ResidentCreate
from app.services.resident_repository import DuplicateResidentIdError, get_resident_repository
from app.services.resident_service import ResidentService
from app.utils.security import create_access_token


class InMemoryResidentRepository:
    """Stand-in for ResidentRepository backed by dicts."""

    def __init__(self):
        self.residents: dict[str, dict] = {}
        self.family_heads: dict[str, FamilyHead] = {}
        self.qr_saves: list[str] = []

    def add_family_head(self, head_id: str, address: str, **extra) -> FamilyHead:
        head = FamilyHead(head_id=head_id, address=address, **extra)
        self.family_heads[head_id] = head
        return head

    def add_resident(self, resident_id: str, **overrides) -> Resident:
        row = {
            "resident_id": resident_id,
            "first_name": "Juan",
            "last_name": "Dela Cruz",
            "gender": "Male",
            "birth_date": "1990-05-17",
            "address": "45 Mabini St",
            "contact_number": "",
            "family_head_id": None,
            "registration_date": "2024-01-02T08:00:00+00:00",
            "qr_code": None,
        }
        row.update(overrides)
        self.residents[resident_id] = row
        return Resident.model_validate(row)

    def _public(self, row: dict) -> Resident:
        return Resident.model_validate({k: v for k, v in row.items() if k != "qr_code"})

    def count_residents(self) -> int:
        return len(self.residents)

    def max_resident_sequence(self, year: int) -> int:
        prefix = f"R-{year}"
        return max(
            (int(rid[len(prefix):]) for rid in self.residents if rid.startswith(prefix)),
            default=0,
        )

    def list_residents(self) -> list[Resident]:
        return [self._public(row) for _, row in sorted(self.residents.items())]

    def get_resident(self, resident_id: str, include_qr: bool = False):
        row = self.residents.get(resident_id)
        if row is None:
            return None
        return Resident.model_validate(row) if include_qr else self._public(row)

    def insert_resident(self, row: dict) -> Resident:
        if row["resident_id"] in self.residents:
            raise DuplicateResidentIdError(row["resident_id"])
        stored = {**row, "qr_code": None}
        self.residents[row["resident_id"]] = stored
        return self._public(stored)

    def update_resident(self, resident_id: str, fields: dict):
        row = self.residents.get(resident_id)
        if row is None:
            return None
        row.update(fields)
        return self._public(row)

    def save_qr_code(self, resident_id: str, qr_code: str) -> None:
        self.qr_saves.append(resident_id)
        self.residents[resident_id]["qr_code"] = qr_code

    def delete_resident(self, resident_id: str) -> bool:
        return self.residents.pop(resident_id, None) is not None

    def get_family_head(self, head_id: str):
        return self.family_heads.get(head_id)


@pytest.fixture
def repo():
    repository = InMemoryResidentRepository()
    repository.add_family_head("FH-001", "123 Elm St", first_name="Maria", last_name="Santos")
    return repository


@pytest.fixture
def service(repo):
    return ResidentService(repo)


@pytest.fixture
def admin():
    return Principal(username="kapitan", role="admin")


def resident_principal(resident_id: str) -> Principal:
    return Principal(username=f"user-{resident_id}", role="resident", resident_id=resident_id)


@pytest.fixture
def new_resident():
    return ResidentCreate(
        first_name="Ana",
        last_name="Reyes",
        gender="Female",
        birth_date="1995-03-14",
        address="999 Fake St",
        contact_number="0917 123 4567",
    )


@pytest.fixture
def client(repo):
    from app.main import app

    app.dependency_overrides[get_resident_repository] = lambda: repo
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer(username: str, role: str, resident_id: str | None = None) -> dict:
    return {"Authorization": f"Bearer {create_access_token(username, role, resident_id)}"}


@pytest.fixture
def admin_headers():
    return bearer("kapitan", "admin")


def failing_qr(*args, **kwargs):
    raise ServerError()
