"""Database seeding for Umuturage.

Creates the initial admin account. Admins build the administrative tree
and assign leaders through the API afterwards.
"""

import logging

from sqlalchemy.orm import Session

from umuturage.core.rbac.roles import UserRole
from umuturage.core.security import get_password_hash
from umuturage.db.models import User

logger = logging.getLogger(__name__)


def seed_admin(
    db: Session,
    username: str,
    email: str,
    password: str,
) -> User:
    """
    Create the admin account.
    
    Idempotent - if a user with the email already exists it is returned
    unchanged.
    
    Args:
        db: Database session
        username: Display name
        email: Login email
        password: Plain password, stored hashed
        
    Returns:
        The admin user
    """
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        if existing.role != UserRole.ADMIN.value:
            logger.warning("User %s exists but is %s, not admin", email, existing.role)
        return existing
    
    admin = User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        role=UserRole.ADMIN.value,
    )
    db.add(admin)
    db.flush()
    
    logger.info("Created admin %s", email)
    return admin


# CLI script for seeding
if __name__ == "__main__":
    import sys
    from umuturage.core.config import get_settings
    from umuturage.core.logger import setup_logger
    from umuturage.db.session import create_session
    
    settings = get_settings()
    setup_logger("umuturage", level=settings.log_level, log_dir=settings.log_dir)
    
    db = create_session()
    try:
        admin = seed_admin(
            db,
            username=settings.admin_username,
            email=settings.admin_email,
            password=settings.admin_password,
        )
        db.commit()
        print(f"Admin ready: {admin.email} (ID: {admin.id})")
        
    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()
