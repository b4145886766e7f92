# generate_fixtures.py
# Service for generating league fixtures (double round-robin) for a season.

from dataclasses import dataclass
from typing import Hashable, List, Sequence

from sqlmodel import Session

from gully_backend.core.logger import get_logger
from gully_backend.models.match_model import Match

logger = get_logger(__name__)


@dataclass(frozen=True)
class Fixture:
    round: int
    home_team_id: Hashable
    away_team_id: Hashable


def generate_fixtures(team_ids: Sequence[Hashable]) -> List[Fixture]:
    """
    Double round-robin schedule using the "Circle Method".
    - Each team plays every other team twice (home & away)
    - Odd team counts get a dummy "bye" that is never turned into a match
    - Fewer than two teams gives an empty schedule
    """
    teams = list(team_ids)
    if len(teams) % 2 != 0:
        teams.append(None)  # Add a dummy "bye" if odd number of teams

    num_teams = len(teams)
    rounds_per_half = num_teams - 1
    half = num_teams // 2

    fixtures: List[Fixture] = []

    for round_index in range(rounds_per_half * 2):
        second_half = round_index >= rounds_per_half

        for i in range(half):
            home = teams[i]
            away = teams[num_teams - 1 - i]

            if home is None or away is None:
                continue  # Skip bye pairings

            # Swap home/away in the second half of the schedule
            if second_half:
                home, away = away, home

            fixtures.append(Fixture(round=round_index + 1, home_team_id=home, away_team_id=away))

        # Rotate teams (keep the first team fixed, last one moves to index 1)
        teams = [teams[0]] + [teams[-1]] + teams[1:-1]

    return fixtures


def create_league_fixtures(session: Session, season_id: int, team_ids: Sequence[int]) -> List[Match]:
    """
    Persists one unplayed Match per fixture for a season.
    The caller owns the transaction (nothing is committed here).
    """
    matches = [
        Match(
            season_id=season_id,
            round_number=fixture.round,
            team_a_id=fixture.home_team_id,
            team_b_id=fixture.away_team_id,
            is_completed=False,
        )
        for fixture in generate_fixtures(team_ids)
    ]
    session.add_all(matches)

    logger.info(f"📅 Fixtures generated for season {season_id} ({len(matches)} matches total)")
    return matches
