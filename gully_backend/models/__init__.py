# gully_backend/models/__init__.py
# Centralized imports for all database models and schemas

# Season and teams
from .season_model import Season, Team

# Players (career identity)
from .player_model import Player, TeamPlayer

# Matches, innings, balls and career rows
from .match_model import Match, Innings, Ball, MatchPlayerStats

# API schemas
from .schemas import (
    SeasonCreate, SeasonRead, TossRequest, BallRequest, BallRead,
    BowlOutResultRequest, MatchStateRead, MatchResultRead
)
