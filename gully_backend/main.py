from fastapi import FastAPI

from gully_backend.core.config import SEED_DEMO, TEST_MODE
from gully_backend.core.database import init_db
from gully_backend.core.logger import get_logger
from gully_backend.seed.seed_season import seed_demo_season

# --- Routers ---
from gully_backend.routes.season_routes import router as season_router
from gully_backend.routes.match_routes import router as match_router
from gully_backend.routes.player_routes import router as player_router

logger = get_logger(__name__)

app = FastAPI(title="Gully Cricket Tournament")


@app.on_event("startup")
async def on_startup():
    # 1️⃣ Init DB tables async
    if TEST_MODE:
        logger.info("🧪 TEST_MODE on, skipping startup database work")
        return
    await init_db()

    # 2️⃣ Optional demo data (sync engine)
    if SEED_DEMO:
        seed_demo_season()

    logger.info("🏏 Gully cricket backend ready")


# Routers
app.include_router(season_router, prefix="/seasons", tags=["Seasons"])
app.include_router(match_router, prefix="/matches", tags=["Matches"])
app.include_router(player_router, prefix="/players", tags=["Players"])
