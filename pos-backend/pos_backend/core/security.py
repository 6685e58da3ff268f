import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: int
    username: str
    role: str


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        logger.info("Rejected request to %s: no bearer token", request.url.path)
        raise HTTPException(status_code=401, detail="Authentication required")

    settings = request.app.state.settings
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured")
        raise HTTPException(status_code=500, detail="JWT Secret not configured.")

    try:
        claims = jwt.decode(credentials.credentials, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return CurrentUser.model_validate(claims)
    except (jwt.InvalidTokenError, ValueError):
        logger.info("Rejected request to %s: invalid or expired token", request.url.path)
        raise HTTPException(status_code=403, detail="Invalid or expired token")
