"""
Barangay Portal — Security Utilities
Input sanitization and JWT access tokens for the bearer-auth layer.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from app.config import get_settings


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be decoded or is expired."""


# ══════════════════════════════════════════
# Input Sanitization
# ══════════════════════════════════════════

def sanitize_input(text: str, max_length: int = 500) -> str:
    """
    Clean user input before it reaches storage.
    Removes HTML tags and control characters, trims whitespace, limits length.
    """
    if not text:
        return ""
    # Remove HTML tags
    text = re.sub(r"<[^>]+>", "", text)
    # Remove control characters
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
    return text.strip()[:max_length]


def sanitize_phone(phone: str) -> str:
    """Normalize phone number to digits only (PH mobile: 09XXXXXXXXX)."""
    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 12 and digits.startswith("63"):
        digits = "0" + digits[2:]
    return digits


# ══════════════════════════════════════════
# JWT Access Tokens
# ══════════════════════════════════════════

def create_access_token(
    username: str,
    role: str,
    resident_id: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a signed access token carrying the principal's claims."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: Dict[str, Any] = {"sub": username, "role": role, "exp": expire}
    if resident_id:
        claims["residentId"] = resident_id
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify an access token. Raises InvalidTokenError."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e
    if not payload.get("sub") or not payload.get("role"):
        raise InvalidTokenError("Token is missing subject or role")
    return payload
