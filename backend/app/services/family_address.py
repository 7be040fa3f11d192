"""
Barangay Portal — Family Address Propagation
A resident linked to a family head always carries the head's address.
"""

from typing import Optional

from app.core.errors import ValidationError
from app.utils.logger import logger


FAMILY_HEAD_MISSING = "Family head does not exist"


def resolve_address(repository, family_head_id: Optional[str], address: str) -> str:
    """
    Address to store for a resident.
    Without a family head the submitted address stands; with one, the
    head's address replaces it. An unknown head rejects the write.
    """
    if not family_head_id:
        if not address or not address.strip():
            raise ValidationError(
                "Address is required",
                errors=[{"field": "address", "message": "Address is required"}],
            )
        return address

    head = repository.get_family_head(family_head_id)
    if head is None:
        raise ValidationError(
            FAMILY_HEAD_MISSING,
            errors=[{"field": "familyHeadId", "message": FAMILY_HEAD_MISSING}],
        )

    if head.address != address:
        logger.info(f"🏠 Address taken from family head {family_head_id}")
    return head.address
