from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from umuturage import __version__
from umuturage.core.config import get_settings
from umuturage.core.logger import setup_logger
from umuturage.api.errors import register_exception_handlers
from umuturage.api.routers import auth, households, approvals, units, health
from umuturage.api.middleware.request_log import RequestLogMiddleware
from umuturage.api.middleware.security_headers import SecurityHeadersMiddleware

settings = get_settings()

setup_logger("umuturage", level=settings.log_level, log_dir=settings.log_dir)

app = FastAPI(
    title=settings.app_name,
    description="Household approval workflow for the sector, cell, village and isibo hierarchy",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLogMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(households.router, prefix="/api")
for tier_router in approvals.routers.values():
    app.include_router(tier_router, prefix="/api")
app.include_router(units.router, prefix="/api")
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
