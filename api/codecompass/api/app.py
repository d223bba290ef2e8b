"""
FastAPI application definition.

This module creates and configures the FastAPI application instance,
including logging, middleware, and router registration.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codecompass import __version__
from codecompass.api.routes import router
from codecompass.core.config import settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="CodeCompass Search API",
    description="Semantic code search with adaptive query refinement",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routes
app.include_router(router)


@app.get("/ping")
async def ping():
    """Health check endpoint."""
    return {"message": "pong"}
