import os

# =====================================
# Global configuration for the gully backend
# =====================================

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


# Database location. Defaults to a SQLite file next to the package.
DATABASE_URL = os.getenv("GULLY_DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'gully.db')}")

# Echo every SQL statement (noisy, handy while debugging the scorer)
SQL_ECHO = _env_flag("GULLY_SQL_ECHO")

# DEBUG switches the logger to DEBUG level
DEBUG = _env_flag("GULLY_DEBUG")

# Seed a small demo season on startup if the database has none
SEED_DEMO = _env_flag("GULLY_SEED_DEMO")

# TEST_MODE:
# When True, startup skips table creation and demo seeding.
# Tests build their own in-memory schema instead.
TEST_MODE = _env_flag("TEST_MODE")


def async_database_url(url: str = DATABASE_URL) -> str:
    """Maps a sync SQLite URL onto its aiosqlite twin (other drivers pass through)."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url
