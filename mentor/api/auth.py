# mentor/api/auth.py
from typing import Optional
import logging

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ANONYMOUS = "anonymous"


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get("access_token") or request.headers.get("x-auth-token")


async def get_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Resolve the caller's principal id from a JWT (bearer header, access_token
    cookie or x-auth-token header). The pipeline itself never sees the token.
    """
    cfg = request.app.state.settings
    if not cfg.auth_required:
        return ANONYMOUS

    credentials_exception = HTTPException(
        status_code=401,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _extract_token(request, credentials)
    if token is None:
        logger.warning("No authentication token found")
        raise credentials_exception

    try:
        payload = jwt.decode(token, cfg.jwt_secret, algorithms=[cfg.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise credentials_exception

    principal = payload.get("sub") or payload.get("id")
    if principal is None:
        raise credentials_exception
    return str(principal)
