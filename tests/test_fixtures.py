from collections import Counter

import pytest
from sqlmodel import select

from gully_backend.models.match_model import Match
from gully_backend.services.generate_fixtures import generate_fixtures


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
def test_every_ordered_pair_exactly_once(n):
    fixtures = generate_fixtures(list(range(1, n + 1)))
    assert len(fixtures) == n * (n - 1)

    pairs = Counter((f.home_team_id, f.away_team_id) for f in fixtures)
    for a in range(1, n + 1):
        for b in range(1, n + 1):
            if a != b:
                assert pairs[(a, b)] == 1


@pytest.mark.parametrize("n", [3, 4, 5])
def test_no_team_plays_twice_in_a_round(n):
    fixtures = generate_fixtures(list(range(n)))
    by_round = {}
    for f in fixtures:
        seen = by_round.setdefault(f.round, [])
        assert f.home_team_id not in seen
        assert f.away_team_id not in seen
        seen.extend([f.home_team_id, f.away_team_id])


def test_three_teams_six_matches():
    fixtures = generate_fixtures(["A", "B", "C"])
    assert len(fixtures) == 6
    assert None not in {f.home_team_id for f in fixtures} | {f.away_team_id for f in fixtures}


def test_round_count():
    assert max(f.round for f in generate_fixtures(list(range(4)))) == 6
    # Odd counts get a bye, so one more round per half
    assert max(f.round for f in generate_fixtures(list(range(5)))) == 10


def test_second_half_swaps_venues():
    fixtures = generate_fixtures([1, 2, 3, 4])
    first_half = [(f.home_team_id, f.away_team_id) for f in fixtures if f.round <= 3]
    second_half = [(f.away_team_id, f.home_team_id) for f in fixtures if f.round > 3]
    assert first_half == second_half


@pytest.mark.parametrize("teams", [[], [1]])
def test_too_few_teams_is_empty(teams):
    assert generate_fixtures(teams) == []


def test_season_creates_league_matches(session, make_season):
    season = make_season(["A", "B", "C", "D"])
    matches = session.exec(select(Match).where(Match.season_id == season.id)).all()
    assert len(matches) == 12
    assert all(not m.is_completed for m in matches)
    assert all(1 <= m.round_number <= 6 for m in matches)
