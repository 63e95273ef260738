# mailer/main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
from mailer.config import settings
from mailer.dependencies import setup_services
from mailer.middleware.cors import setup_cors
from mailer.middleware.errors import setup_error_handlers
from mailer.routes.public import router as public_router, debug_router
from mailer.routes.subscription import router as subscription_router

import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Mailer API...")
    setup_services(app.state, settings)
    logger.info(f"Services configured (captcha={settings.captcha_provider}, environment={settings.environment})")

    yield

    logger.info("Shutting down Mailer API...")

app = FastAPI(
    title="Mailer API",
    description="Newsletter double opt-in subscriptions backed by Loops",
    version="1.0.0",
    lifespan=lifespan
)

# Setup CORS and error rendering
setup_cors(app, settings)
setup_error_handlers(app)

app.include_router(subscription_router)
app.include_router(public_router)

if settings.environment == "development":
    app.include_router(debug_router)

@app.middleware("http")
async def no_store(request, call_next):
    """API responses are never cacheable"""
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store"
    return response

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.environment}
