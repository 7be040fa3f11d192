"""
Barangay Portal — Auth API Router
Bearer-token authentication. Turns the Authorization header into a
Principal that routes hand to the service layer.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.models.auth import Principal
from app.utils.logger import logger
from app.utils.security import InvalidTokenError, decode_access_token

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the acting principal from the bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning(f"🔒 Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Principal(
        username=claims["sub"],
        role=claims["role"],
        resident_id=claims.get("residentId"),
    )


@router.get("/me", response_model=Principal)
async def read_current_principal(principal: Principal = Depends(get_current_principal)):
    """Who the caller is, as seen by the API."""
    return principal
