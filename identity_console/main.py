# main.py

"""
Identity Console API - Main Entry Point
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from identity_console.core.config import settings
from identity_console.core.errors import register_error_handlers
from identity_console.routers import account_router, job_router, template_router, user_router
from identity_console.routers.deps import identity_client, job_service

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} {settings.app_version} starting")
    yield
    logger.info("Shutting down: stopping active import jobs")
    await job_service.shutdown()
    await identity_client.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(account_router.router)
app.include_router(job_router.router)
app.include_router(user_router.router)
app.include_router(template_router.router)


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "accounts": "/api/accounts",
            "import_job": "/api/jobs/{account_id}",
            "import_user": "/api/import-user",
            "users": "/api/users/{account_id}",
            "templates": "/api/templates/{account_id}/{template_type}",
            "health": "/health",
            "docs": "/docs"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.app_version,
        "active_jobs": job_service.active_jobs_count()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "identity_console.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
