"""
Barangay Portal — QR Identity Artifact
Encodes a resident's public identity claim as a QR code PNG (data URL)
and caches it on the resident record. Generated at most once per record.
"""

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from app.config import get_settings
from app.core.errors import ServerError
from app.models.resident import QRClaim, Resident
from app.utils.logger import logger


DATA_URL_PREFIX = "data:image/png;base64,"


def build_claim(resident: Resident) -> QRClaim:
    return QRClaim(id=resident.resident_id, name=resident.full_name)


def encode_claim(claim: QRClaim) -> str:
    """Compact JSON text that goes into the QR code."""
    return claim.model_dump_json()


def decode_payload(payload: str) -> QRClaim:
    """Parse a scanned QR payload back into a claim."""
    return QRClaim.model_validate_json(payload)


def generate_qr_data_url(data: str) -> str:
    """
    Generate a QR code as a base64 PNG data URL.
    Raises ServerError if encoding fails.
    """
    settings = get_settings()
    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_M,
            box_size=settings.qr_box_size,
            border=settings.qr_border,
        )
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    except Exception as e:
        logger.error(f"❌ QR code generation failed: {e}")
        raise ServerError() from e

    return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode("utf-8")


class QRCodeService:
    def __init__(self, repository):
        self.repository = repository

    def generate(self, resident: Resident) -> str:
        """Generate and persist a fresh artifact for `resident`."""
        qr_code = generate_qr_data_url(encode_claim(build_claim(resident)))
        self.repository.save_qr_code(resident.resident_id, qr_code)
        logger.info(f"🔳 QR code generated for resident {resident.resident_id}")
        return qr_code

    def get_or_create(self, resident: Resident) -> str:
        """Return the cached artifact, generating it on first use."""
        if resident.qr_code:
            return resident.qr_code
        return self.generate(resident)
