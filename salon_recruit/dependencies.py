import time

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from salon_recruit.auth.jwt import ADMIN_SUBJECT, decode_token
from salon_recruit.config import settings

security = HTTPBearer(auto_error=False)


async def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> None:
    # No PIN configured: admin API is open (local development)
    if not settings.ADMIN_PIN:
        return

    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    if payload.get("sub") != ADMIN_SUBJECT:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")


class FixedWindowRateLimiter:
    """In-memory per-client request counter. Single process only."""

    def __init__(self, limit: int, window_seconds: int, max_tracked: int = 10_000):
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_tracked = max_tracked
        self._buckets: dict[str, tuple[int, float]] = {}

    @property
    def tracked(self) -> int:
        return len(self._buckets)

    def _prune(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._buckets.items() if now >= reset_at]
        for key in expired:
            del self._buckets[key]

    def hit(self, key: str, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        if len(self._buckets) >= self.max_tracked:
            self._prune(now)
        count, reset_at = self._buckets.get(key, (0, 0.0))
        if now >= reset_at:
            self._buckets[key] = (1, now + self.window_seconds)
            return True
        self._buckets[key] = (count + 1, reset_at)
        return count + 1 <= self.limit

    def reset(self) -> None:
        self._buckets.clear()


public_rate_limiter = FixedWindowRateLimiter(settings.PUBLIC_RATE_LIMIT, settings.PUBLIC_RATE_WINDOW_SECONDS)


async def public_rate_limit(request: Request) -> None:
    client_ip = request.client.host if request.client else "unknown"
    if not public_rate_limiter.hit(client_ip):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please wait a moment.",
            headers={"Retry-After": str(settings.PUBLIC_RATE_WINDOW_SECONDS)},
        )
