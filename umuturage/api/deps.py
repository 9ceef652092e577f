from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from umuturage.db.session import create_session
from umuturage.db.models import User
from umuturage.core.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = create_session()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    """Get current authenticated user from the bearer token.
    
    The token's role must still match the stored account so a demoted
    leader's old token stops working.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    if not token:
        raise credentials_exception
    
    decoded = decode_token(token)
    if not decoded:
        raise credentials_exception
    
    user_id, role = decoded
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active or user.role != role.value:
        raise credentials_exception
    
    return user
