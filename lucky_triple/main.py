"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.routes import init_dependencies, router as api_router
from .config import settings
from .game import GameSessionManager
from .payout import DisabledPayoutGateway, HttpPayoutGateway

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


# Global instances
session_manager: GameSessionManager = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global session_manager

    # Startup
    if settings.payout_endpoint:
        gateway = HttpPayoutGateway(settings.payout_endpoint, settings.payout_timeout)
        if await gateway.check_connection():
            logger.info("Connected to payout service at %s", settings.payout_endpoint)
        else:
            logger.warning("Cannot connect to payout service at %s", settings.payout_endpoint)
    else:
        gateway = DisabledPayoutGateway()
        logger.warning("No payout endpoint configured; winning games will record failed payouts")

    session_manager = GameSessionManager.from_settings(gateway, settings)
    init_dependencies(session_manager)
    await session_manager.start()
    logger.info("Starting The Lucky Triple Server")

    try:
        yield
    finally:
        # Shutdown
        await session_manager.shutdown()
        logger.info("Stop Server")


# Create FastAPI app
app = FastAPI(
    title="The Lucky Triple",
    description="Three-card draw game with CARDS token rewards",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "The Lucky Triple Server is running!"}


def main():
    """Run the server."""
    import uvicorn

    uvicorn.run(
        "lucky_triple.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
