"""
FastAPI Application Entry Point.

Path: inkwell/main.py
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkwell import __version__
from inkwell.api.errors import register_exception_handlers
from inkwell.api.routes import articles
from inkwell.infrastructure.config.logging_config import configure_logging
from inkwell.infrastructure.config.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title="Inkwell API",
    description="Article publishing: moderation workflow, engagement and discovery",
    version=__version__,
    debug=settings.debug,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routes
app.include_router(articles.router, prefix="/api/v1")
app.include_router(articles.authors_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Inkwell API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
