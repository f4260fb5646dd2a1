import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from golinks_app.config import settings
from golinks_app.database.connection import SessionLocal, init_db
from golinks_app.api.v1 import admin, redirect
from golinks_app.services.link_store import LinkStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("golinks")


def bootstrap():
    """Create tables, apply additive migrations and seed the default domain"""
    init_db()
    db = SessionLocal()
    try:
        LinkStore(db).ensure_default_domain()
        db.commit()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap()
    logger.info("%s running on http://%s:%s", settings.app_name, settings.host, settings.port)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Go links: short keys and templates redirecting to URLs, per hostname",
    debug=settings.debug,
    # Every path outside the admin prefix is a slug
    docs_url=f"/{settings.admin_prefix}/docs",
    redoc_url=None,
    openapi_url=f"/{settings.admin_prefix}/openapi.json",
    lifespan=lifespan
)


@app.get(f"/{settings.admin_prefix}/")
def read_root():
    """Admin index with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "api": f"/{settings.admin_prefix}/api/v1",
        "docs": f"/{settings.admin_prefix}/docs",
    }


@app.get(f"/{settings.admin_prefix}/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers (the redirect catch-all must stay last)
app.include_router(admin.router, prefix=f"/{settings.admin_prefix}/api/v1")
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
