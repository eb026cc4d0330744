"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hsm_order.config import settings
from hsm_order.engine.pipeline import register_stages

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.hsm_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="HSM Axis Order",
        description="Hough space measure dimension ordering for parallel coordinates",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all stage modules to trigger registration
    register_stages()

    from hsm_order.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
