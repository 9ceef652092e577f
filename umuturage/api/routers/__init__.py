"""API routers for Umuturage."""

from . import auth
from . import households
from . import approvals
from . import units
from . import health

__all__ = [
    "auth",
    "households",
    "approvals",
    "units",
    "health",
]
