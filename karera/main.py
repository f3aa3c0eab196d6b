"""FastAPI application entry point for Karera."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from karera import __version__
from karera.config import settings
from karera.api import race as race_api
from karera.engine.errors import RaceError
from karera.engine.race import RaceEngine
from karera.models.database import async_session, init_db
from karera.results.tracker import restore_engine_history

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logger.info("Starting Karera...")

    # Ensure data directory exists
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)

    await init_db()
    logger.info(f"Database initialized at {settings.db_path}")

    engine = RaceEngine()
    async with async_session() as db:
        next_race_id = await restore_engine_history(db, engine)
    app.state.race_engine = engine
    logger.info(f"Race engine ready, owner={engine.get_owner()}, next race {next_race_id}")

    yield

    logger.info("Shutting down Karera...")


app = FastAPI(
    title="Karera",
    description="Deterministic horse race simulation and exacta payouts",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(RaceError)
async def race_error_handler(request: Request, exc: RaceError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code} ({exc.message})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(race_api.router, prefix="/api/race", tags=["race"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("karera.main:app", host="127.0.0.1", port=8000, reload=settings.debug)
