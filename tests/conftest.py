import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from gully_backend.core.ball_outcome import DismissalKind, ScoreInput
from gully_backend.core.database import enable_sqlite_foreign_keys, get_session, init_db_sync
from gully_backend.main import app
from gully_backend.services.match_session import start_match
from gully_backend.services.match_store import MatchStore
from gully_backend.services.progression import build_event_bus
from gully_backend.services.season_service import create_season_with_fixtures

# Keypad shorthand used across the tests
KEYS = {
    "0": (ScoreInput.runs(0), None),
    "1": (ScoreInput.runs(1), None),
    "wd": (ScoreInput.wide(), None),
    "nb": (ScoreInput.no_ball(), None),
    "W": (ScoreInput.wicket(), DismissalKind.BOWLED),
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db_sync(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_season(session):
    def _make(teams=("Alpha", "Bravo"), players=None, name="Test Season"):
        return create_season_with_fixtures(session, name, list(teams), players)
    return _make


@pytest.fixture
def press():
    def _press(live, keys):
        for key in keys:
            score_input, dismissal = KEYS[key]
            live.record_ball(score_input, dismissal)
        return live
    return _press


@pytest.fixture
def play_match(session, press):
    """
    Plays a whole match: team A wins the toss and bats.
    Returns the live MatchSession after the second innings.
    """
    def _play(match_id, first, second, events=None):
        store = MatchStore(session)
        match = store.get_match(match_id)
        bus = events if events is not None else build_event_bus(session)
        live = start_match(store, match_id, match.team_a_id, "bat", bus)
        press(live, first)
        assert live.start_second_innings()
        press(live, second)
        return live
    return _play
