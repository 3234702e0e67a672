import secrets

import structlog
from fastapi import APIRouter, HTTPException, status

from salon_recruit.auth.jwt import create_access_token, create_refresh_token, decode_token
from salon_recruit.auth.schemas import LoginRequest, RefreshRequest, TokenResponse
from salon_recruit.config import settings

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest):
    if not settings.ADMIN_PIN or not secrets.compare_digest(data.pin, settings.ADMIN_PIN):
        logger.warning("admin_login_failed")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin pin")

    return TokenResponse(
        access_token=create_access_token(),
        refresh_token=create_refresh_token(),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(data: RefreshRequest):
    payload = decode_token(data.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    subject = payload.get("sub")
    return TokenResponse(
        access_token=create_access_token(subject),
        refresh_token=create_refresh_token(subject),
    )
