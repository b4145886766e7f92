"""
seed_season.py
--------------
Seeds a small demo season (4 teams, one player each) with its full
double round-robin schedule.

✅ Safe to run multiple times: skips seeding when any season exists.

Usage:
    python -m gully_backend.seed.seed_season
"""

from typing import Optional

from sqlmodel import Session, select

from gully_backend.core.database import get_sync_session, init_db_sync
from gully_backend.core.logger import get_logger
from gully_backend.models.season_model import Season
from gully_backend.services.season_service import create_season_with_fixtures

logger = get_logger(__name__)

DEMO_SEASON_NAME = "Gully Premier League"
DEMO_TEAMS = ["Lane Strikers", "Terrace Titans", "Backyard Blasters", "Corner Kings"]
DEMO_PLAYERS = ["Arjun", "Kabir", "Rohan", "Vikram"]


def seed_demo_season(session: Optional[Session] = None) -> Optional[int]:
    """Returns the new season id, or None when the database already has seasons."""
    own_session = session is None
    if own_session:
        session = get_sync_session()

    try:
        if session.exec(select(Season)).first():
            logger.info("✅ Seasons already exist. Skipping demo seed.")
            return None

        logger.info("🌱 No seasons found. Seeding demo season...")
        season = create_season_with_fixtures(session, DEMO_SEASON_NAME, DEMO_TEAMS, DEMO_PLAYERS)
        logger.info(f"✅ Demo season '{season.name}' seeded (id={season.id})")
        return season.id
    finally:
        if own_session:
            session.close()


if __name__ == "__main__":
    init_db_sync()
    seed_demo_season()
