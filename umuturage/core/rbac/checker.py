"""Role checking utilities for API endpoints."""

from functools import wraps
from typing import Callable, Union

from umuturage.core.errors import RoleDenied
from .roles import UserRole


def has_role(user, *roles: Union[str, UserRole]) -> bool:
    """
    Check if a user holds one of the given roles.
    
    Args:
        user: User model instance
        roles: Allowed roles
        
    Returns:
        True if the user's role is among them
    """
    if not user or not user.role:
        return False
    
    allowed = {UserRole(r) for r in roles}
    return UserRole(user.role) in allowed


def require_role(*roles: Union[str, UserRole]):
    """
    Decorator factory for FastAPI endpoints restricted to specific roles.
    
    The decorated endpoint must receive ``current_user`` as a keyword
    argument (injected with ``Depends(get_current_user)``).
    
    Usage:
        @router.get("/pending-approvals")
        @require_role(UserRole.CELL_LEADER)
        async def list_pending(current_user: User = Depends(get_current_user)):
            ...
    """
    allowed = [UserRole(r) for r in roles]
    label = ", ".join(r.value for r in allowed)
    
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_user = kwargs.get("current_user")
            if not has_role(current_user, *allowed):
                raise RoleDenied(f"Access denied. Only {label} allowed.")
            return await func(*args, **kwargs)
        
        return wrapper
    return decorator
