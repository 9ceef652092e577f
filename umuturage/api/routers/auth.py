from datetime import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from umuturage.api.deps import get_db, get_current_user
from umuturage.api.schemas.auth import (
    LoginResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from umuturage.core.errors import RoleDenied, ValidationError
from umuturage.core.rbac.roles import PRIVILEGED_ROLES, UserRole
from umuturage.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
)
from umuturage.db.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    """Register a new leader account."""
    if user_in.role in PRIVILEGED_ROLES:
        raise RoleDenied("Admin accounts cannot be self-registered")
    
    if not user_in.username.strip() or not user_in.password:
        raise ValidationError("All fields are required")
    
    # Check if email already exists
    existing_user = db.query(User).filter(User.email == user_in.email).first()
    if existing_user:
        raise ValidationError("User already exists")
    
    user = User(
        username=user_in.username.strip(),
        email=user_in.email,
        password_hash=get_password_hash(user_in.password),
        role=user_in.role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    
    logger.info("Registered %s as %s", user.email, user.role)
    return user


@router.post("/login", response_model=LoginResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get an access token."""
    user = db.query(User).filter(User.email == credentials.email).first()
    
    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    if not user.is_active:
        raise RoleDenied("Inactive user")
    
    # Update last login
    user.last_login = datetime.utcnow()
    db.commit()
    
    access_token = create_access_token(user.id, UserRole(user.role))
    return LoginResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the current user's username, email or password."""
    if user_in.username is not None:
        if not user_in.username.strip():
            raise ValidationError("Username cannot be blank")
        current_user.username = user_in.username.strip()
    
    if user_in.email is not None and user_in.email != current_user.email:
        taken = db.query(User).filter(User.email == user_in.email, User.id != current_user.id).first()
        if taken:
            raise ValidationError("Email already registered")
        current_user.email = user_in.email
    
    if user_in.password:
        current_user.password_hash = get_password_hash(user_in.password)
    
    db.commit()
    db.refresh(current_user)
    return current_user
