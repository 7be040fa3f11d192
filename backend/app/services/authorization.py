"""
Barangay Portal — Authorization Gate
One policy for every resident operation:

- admins may do anything
- a non-admin may read, fetch the QR code of, or update only their own record
- list, create and delete are admin-only

The gate runs before the target record is touched, so a denied caller
learns nothing about whether the target exists.
"""

from enum import Enum

from app.core.errors import ForbiddenError
from app.models.auth import Principal
from app.utils.logger import logger


class Operation(str, Enum):
    LIST = "list"
    READ = "read"
    QR = "qr"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


ADMIN_ONLY = {Operation.LIST, Operation.CREATE, Operation.DELETE}

DENIAL_MESSAGES = {
    Operation.LIST: "Admin access required",
    Operation.CREATE: "Admin access required",
    Operation.DELETE: "Admin access required",
    Operation.READ: "Not authorized to view this resident",
    Operation.QR: "Not authorized to access this QR code",
    Operation.UPDATE: "Not authorized to update this resident",
}


def is_allowed(principal: Principal, target_id: str | None, operation: Operation) -> bool:
    if principal.is_admin:
        return True
    if operation in ADMIN_ONLY:
        return False
    return bool(principal.resident_id) and principal.resident_id == target_id


def authorize(principal: Principal, target_id: str | None, operation: Operation) -> None:
    """Raise ForbiddenError unless `principal` may perform `operation` on `target_id`."""
    if is_allowed(principal, target_id, operation):
        return
    logger.warning(
        f"🚫 Denied {operation.value} on resident {target_id or '*'} "
        f"for user {principal.username} (role={principal.role})"
    )
    raise ForbiddenError(DENIAL_MESSAGES[operation])
