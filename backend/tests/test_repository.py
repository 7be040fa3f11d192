import pytest
from unittest.mock import MagicMock

from postgrest.exceptions import APIError

from app.core.errors import ServerError
from app.services.resident_repository import DuplicateResidentIdError, ResidentRepository


ROW = {
    "resident_id": "R-2024007",
    "first_name": "Ana",
    "last_name": "Reyes",
    "gender": "Female",
    "birth_date": "1995-03-14",
    "address": "123 Elm St",
    "contact_number": "",
    "family_head_id": "FH-001",
    "registration_date": "2024-06-01T09:30:00+00:00",
}


def _response(data=None, count=None):
    response = MagicMock()
    response.data = data
    response.count = count
    return response


@pytest.fixture
def supabase():
    return MagicMock()


@pytest.fixture
def repository(supabase):
    return ResidentRepository(client=supabase)


def test_count_uses_exact_count(repository, supabase):
    table = supabase.table.return_value
    table.select.return_value.limit.return_value.execute.return_value = _response([ROW], count=41)

    assert repository.count_residents() == 41
    supabase.table.assert_called_with("residents")
    table.select.assert_called_with("resident_id", count="exact")


def test_get_resident_maps_row(repository, supabase):
    chain = supabase.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value = _response([ROW])

    resident = repository.get_resident("R-2024007")

    assert resident.full_name == "Ana Reyes"
    assert resident.family_head_id == "FH-001"
    assert resident.qr_code is None
    assert "qr_code" not in supabase.table.return_value.select.call_args.args[0]


def test_get_resident_with_qr_selects_artifact(repository, supabase):
    chain = supabase.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value = _response([{**ROW, "qr_code": "data:image/png;base64,abc"}])

    resident = repository.get_resident("R-2024007", include_qr=True)

    assert resident.qr_code == "data:image/png;base64,abc"
    assert "qr_code" in supabase.table.return_value.select.call_args.args[0]


def test_get_missing_resident_returns_none(repository, supabase):
    chain = supabase.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value = _response([])

    assert repository.get_resident("R-2099999") is None


def test_unique_violation_becomes_duplicate_error(repository, supabase):
    supabase.table.return_value.insert.return_value.execute.side_effect = APIError(
        {"message": "duplicate key value", "code": "23505", "hint": None, "details": None}
    )

    with pytest.raises(DuplicateResidentIdError) as exc_info:
        repository.insert_resident(dict(ROW))
    assert exc_info.value.resident_id == "R-2024007"


def test_other_storage_errors_become_server_error(repository, supabase):
    supabase.table.return_value.insert.return_value.execute.side_effect = APIError(
        {"message": "permission denied", "code": "42501", "hint": None, "details": None}
    )

    with pytest.raises(ServerError):
        repository.insert_resident(dict(ROW))


def test_family_head_lookup(repository, supabase):
    chain = supabase.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value = _response([
        {"head_id": "FH-001", "first_name": "Maria", "last_name": "Santos",
         "address": "123 Elm St", "contact_number": ""}
    ])

    head = repository.get_family_head("FH-001")

    assert head.address == "123 Elm St"
    supabase.table.assert_called_with("family_heads")


def test_max_sequence_compares_numerically(repository, supabase):
    chain = supabase.table.return_value.select.return_value.like.return_value
    chain.execute.return_value = _response([
        {"resident_id": "R-2026999"},
        {"resident_id": "R-20261000"},
        {"resident_id": "R-2026042"},
    ])

    assert repository.max_resident_sequence(2026) == 1000
    supabase.table.return_value.select.return_value.like.assert_called_with("resident_id", "R-2026%")


def test_max_sequence_without_residents_is_zero(repository, supabase):
    chain = supabase.table.return_value.select.return_value.like.return_value
    chain.execute.return_value = _response([])

    assert repository.max_resident_sequence(2026) == 0
