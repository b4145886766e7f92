from sqlmodel import SQLModel, Session
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import create_engine as create_sync_engine, event

from gully_backend.core.config import DATABASE_URL, SQL_ECHO, async_database_url

# --- Engines ---
# SQLite needs check_same_thread off because FastAPI runs sync routes in a threadpool
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_async_engine(async_database_url(DATABASE_URL), echo=SQL_ECHO, future=True)    # Async
sync_engine = create_sync_engine(DATABASE_URL, echo=SQL_ECHO, future=True, connect_args=_connect_args)  # Sync


def enable_sqlite_foreign_keys(target_engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(sync_engine)

# --- Async session maker ---
async_session_maker = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# --- Initialize DB tables ---
async def init_db():
    """Create tables asynchronously if they don't exist."""
    from gully_backend import models  # noqa: F401  (registers every table on the metadata)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


def init_db_sync(target_engine=sync_engine):
    """Create tables on a sync engine (scripts and tests)."""
    from gully_backend import models  # noqa: F401

    SQLModel.metadata.create_all(target_engine)


# --- Sync session for seeding/scripts ---
def get_sync_session():
    return Session(sync_engine)


# --- Session dependency (used in routes) ---
def get_session():
    with Session(sync_engine) as session:
        yield session
