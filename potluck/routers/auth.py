from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from potluck.auth.deps import get_current_user, get_settings
from potluck.auth.security import create_access_token, verify_password
from potluck.core.config import Settings
from potluck.core.db import get_db
from potluck.models.user import User
from potluck.schemas.auth import LoginRequest, TokenResponse, WhoAmIResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token(settings, subject=str(user.id), role=user.role)
    return TokenResponse(access_token=token)


@router.get("/whoami", response_model=WhoAmIResponse)
def whoami(user: User = Depends(get_current_user)) -> WhoAmIResponse:
    return WhoAmIResponse(id=user.id, email=user.email, name=user.name, role=user.role)
