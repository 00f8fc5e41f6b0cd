# src/wanderer/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and configures logging + CORS.
Business logic lives in `wanderer.api.routes`, `wanderer.itinerary` and `wanderer.email`.
"""

from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from wanderer.config.settings import get_settings
from wanderer.core.logging import configure_logging

from .routes import router

settings = get_settings()
configure_logging(settings)

app = FastAPI(title="Wanderer API", version="0.1.0")

# The verification hook is called cross-origin, so keep CORS permissive by default
# (configurable via `cors.allow_origins` in YAML).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=settings.cors.allow_headers,
)

app.include_router(router)
