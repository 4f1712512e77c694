from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.exceptions import AuthError, AuthorizationError
from app.core.security import decode_access_token
from app.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to a user."""
    if not token:
        raise AuthError("No token provided")

    payload = decode_access_token(request.app.state.settings, token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthError("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthError("User not found")
    return user


def get_ceo_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_ceo:
        raise AuthorizationError("Access denied. CEO only.")
    return current_user
