"""
AutoMindMap - Main Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.settings import get_settings
from app.routes import summaries, search, bookmarks, stats, explain, chats

# Get settings (fails fast when GEMINI_API_KEY is missing)
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.rate_limit_enabled
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")

    from app.services.storage_service import get_storage_service
    db = await get_storage_service()
    app.state.db = db

    # Inject storage into chat service
    from app.services.chat_service import get_chat_service
    chat_service = get_chat_service()
    chat_service.set_database(db)
    app.state.chat = chat_service
    logger.info("Chat service configured with storage")

    if not settings.youtube_api_key:
        logger.warning("YOUTUBE_API_KEY not set - summaries will use oEmbed metadata without captions")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await app.state.db.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="YouTube study summaries, explanations and an AI tutoring chat",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(summaries.router, prefix="/api/summaries", tags=["Summaries"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])
app.include_router(bookmarks.router, prefix="/api/bookmarks", tags=["Bookmarks"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
app.include_router(explain.router, prefix="/api/explain", tags=["Explain"])
app.include_router(chats.router, prefix="/api/chats", tags=["Chats"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "version": "1.0.0"
    }


@app.get("/api")
async def api_root():
    """API root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "docs": "/docs" if settings.debug else "Disabled in production"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
