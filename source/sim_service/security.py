import secrets

from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import settings

device_bearer = HTTPBearer(auto_error=False, description="Simulator service token")


def _reject(status_code: int, detail: str) -> HTTPException:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


def verify_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Security(device_bearer),
) -> str:
    """
    Guard for the device state endpoints. An empty AUTH_TOKEN means the node
    was started without one, and every request is refused rather than let
    through. Returns the accepted token.
    """
    expected = settings.AUTH_TOKEN
    if not expected:
        raise _reject(503, "Device state API has no token configured")
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _reject(401, "Not authenticated")
    if not secrets.compare_digest(credentials.credentials, expected):
        raise _reject(403, "Invalid token")
    return credentials.credentials
