from fastapi import Depends, Header, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from potluck.auth.policy import Credentials
from potluck.auth.security import decode_access_token
from potluck.core.config import Settings
from potluck.core.db import get_db
from potluck.models.user import User
from potluck.services.audit import RequestMeta
from potluck.services.pipeline import MutationPipeline

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User | None:
    if not credentials:
        return None

    payload = decode_access_token(settings, credentials.credentials)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    subject = payload.get("sub")
    try:
        user = db.get(User, int(subject))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")
    return user


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return user


def get_credentials(
    key: str | None = Query(default=None, max_length=100),
    guest_token: str | None = Header(default=None, alias="X-Guest-Token"),
    user: User | None = Depends(get_optional_user),
) -> Credentials:
    """Credentials presented out of band; payload ``key``/``token`` fields take precedence."""

    return Credentials(
        user_id=user.id if user else None,
        role=user.role if user else None,
        key=key or None,
        token=guest_token or None,
    )


def get_client_ip(request: Request) -> str | None:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else None


def get_request_meta(request: Request) -> RequestMeta:
    return RequestMeta(
        ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
        referer=request.headers.get("Referer"),
    )


def get_pipeline(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> MutationPipeline:
    return MutationPipeline(db, bus=request.app.state.invalidation, write_key=settings.WRITE_KEY)
