import base64

import pytest

from app.core.errors import ServerError
from app.services import qr_service
from app.services.qr_service import (
    DATA_URL_PREFIX, QRCodeService, build_claim, decode_payload, encode_claim,
    generate_qr_data_url,
)


def test_claim_payload_round_trip(repo):
    resident = repo.add_resident("R-2024007", first_name="Ana", last_name="Reyes")

    claim = decode_payload(encode_claim(build_claim(resident)))

    assert claim.model_dump() == {
        "id": "R-2024007",
        "name": "Ana Reyes",
        "type": "Resident",
        "verified": True,
    }


def test_generated_artifact_is_png_data_url():
    data_url = generate_qr_data_url('{"id":"R-2024007"}')

    assert data_url.startswith(DATA_URL_PREFIX)
    png = base64.b64decode(data_url[len(DATA_URL_PREFIX):])
    assert png.startswith(b"\x89PNG\r\n\x1a\n")


def test_get_or_create_generates_once_then_returns_cache(repo):
    repo.add_resident("R-2024007")
    qr = QRCodeService(repo)

    first = qr.get_or_create(repo.get_resident("R-2024007", include_qr=True))
    second = qr.get_or_create(repo.get_resident("R-2024007", include_qr=True))

    assert first == second
    assert repo.qr_saves == ["R-2024007"]


def test_existing_artifact_is_returned_unchanged(repo):
    repo.add_resident("R-2024007", qr_code="data:image/png;base64,cached")
    qr = QRCodeService(repo)

    assert qr.get_or_create(repo.get_resident("R-2024007", include_qr=True)) == "data:image/png;base64,cached"
    assert repo.qr_saves == []


def test_encoding_failure_raises_server_error_and_persists_nothing(repo, monkeypatch):
    repo.add_resident("R-2024007")

    def broken(*args, **kwargs):
        raise RuntimeError("encoder exploded")

    monkeypatch.setattr(qr_service.qrcode, "QRCode", broken)

    with pytest.raises(ServerError):
        QRCodeService(repo).get_or_create(repo.get_resident("R-2024007", include_qr=True))
    assert repo.residents["R-2024007"]["qr_code"] is None
