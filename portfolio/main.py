# portfolio/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from portfolio.core.config import get_settings
from portfolio.core.errors import CatalogError

# Routers
from portfolio.routers.admin import router as admin_router
from portfolio.routers.catalog import router as catalog_router

settings = get_settings()

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Report the storage backend in use.
      - Warn when the default admin token is still configured.
    """
    logger.info("Startup: storage backend = %s", settings.STORAGE_BACKEND)
    if settings.STORAGE_BACKEND == "local":
        logger.info("Startup: catalog document = %s", settings.data_path)
    else:
        logger.info(
            "Startup: catalog document = %s:%s@%s",
            settings.GITHUB_REPO,
            settings.GITHUB_DATA_PATH,
            settings.GITHUB_BRANCH,
        )
    if settings.ADMIN_TOKEN == "changeme":
        logger.warning("Using default admin token. Set ADMIN_TOKEN env var for security.")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render every catalog error as {"ok": false, "error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.message},
    )


app.include_router(admin_router)
app.include_router(catalog_router)

# Local backend serves the generated assets itself
if settings.STORAGE_BACKEND == "local":
    app.mount(
        f"/{settings.ASSETS_DIR}",
        StaticFiles(directory=settings.assets_path, check_dir=False),
        name="assets",
    )


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "portfolio-catalog"}
