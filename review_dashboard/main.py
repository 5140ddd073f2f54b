import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from review_dashboard.config import settings
from review_dashboard.core.exceptions import GrantPlatformException
from review_dashboard.logging_config import configure_logging
from review_dashboard.routers.common import grant_platform_exception_handler

# IMPORT ROUTERS
from review_dashboard.routers.health import router as health_router
from review_dashboard.routers.leaderboard import router as leaderboard_router
from review_dashboard.routers.scoring_analysis import router as scoring_analysis_router

configure_logging()
logger = logging.getLogger(__name__)


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Scoring Analysis"},
    {"name": "Leaderboard"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(GrantPlatformException, grant_platform_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)             # Health
app.include_router(scoring_analysis_router)   # Scoring Analysis
app.include_router(leaderboard_router)        # Leaderboard


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.APP_ENV})")
    if not settings.goodgrants_api_key:
        logger.warning("GOODGRANTS_API_KEY is not set; leaderboard sync is disabled")


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}...")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "review_dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
