#!/usr/bin/env python3
"""
Matching Service - FastAPI Application

Scores, ranks and stores candidate matches for jobs and serves the
employer and candidate match views.

Usage:
    python main.py serve

Then open:
    - http://localhost:3004/health - Health check (port configurable in config.yaml)
    - http://localhost:3004/docs - API Documentation (Swagger UI)
"""

import logging

from fastapi import FastAPI

from .config import get_config
from .exceptions import register_exception_handlers
from .routers import (
    matching_router,
    candidate_router,
    matches_router
)
from .routers.matching import add_rate_limit_handlers

# Load configuration
config = get_config()

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.logging.level.upper(), logging.INFO),
    format=config.logging.format
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Matching Service API",
    description="Candidate-job matching and ranking",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure rate limiting
add_rate_limit_handlers(app)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(matching_router)
app.include_router(candidate_router)
app.include_router(matches_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "matching-service"}


def main():
    """Run the web server."""
    import uvicorn

    logger.info(f"Starting Matching Service on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    main()
