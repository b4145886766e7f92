from datetime import datetime, timezone

from sqlmodel import select

from gully_backend.models.match_model import Match, MatchPlayerStats
from gully_backend.models.player_model import Player
from gully_backend.services.career import career_profile, load_career, player_summaries


def stats_row(match_id, team_id, runs=0, balls=0, out=False, conceded=0, wickets=0, bowled=0, player_id=1):
    return MatchPlayerStats(
        match_id=match_id,
        player_id=player_id,
        team_id=team_id,
        runs_scored=runs,
        balls_faced=balls,
        is_out=out,
        runs_conceded=conceded,
        wickets_taken=wickets,
        legal_balls_bowled=bowled,
    )


def test_career_profile_aggregates():
    matches = {
        1: Match(id=1, season_id=1, team_a_id=10, team_b_id=20, round_number=1, winner_id=10,
                 is_completed=True, created_at=datetime(2024, 5, 1, tzinfo=timezone.utc)),
        2: Match(id=2, season_id=1, team_a_id=20, team_b_id=10, round_number=2, winner_id=20,
                 is_completed=True, created_at=datetime(2024, 5, 2, tzinfo=timezone.utc)),
        3: Match(id=3, season_id=1, team_a_id=10, team_b_id=30, round_number=3, winner_id=None,
                 is_completed=True, created_at=datetime(2024, 5, 3, tzinfo=timezone.utc)),
    }
    rows = [
        stats_row(1, 10, runs=6, balls=8, out=True, conceded=4, wickets=1, bowled=5),
        stats_row(2, 10, runs=3, balls=12, out=False, conceded=9, wickets=0, bowled=12),
        stats_row(3, 10, runs=2, balls=4, out=True, conceded=2, wickets=1, bowled=3),
    ]
    profile = career_profile(rows, matches, {10: "Alpha", 20: "Bravo", 30: "Charlie"})
    stats = profile["stats"]

    assert stats["matches"] == 3
    assert (stats["runs"], stats["innings_bat"], stats["high_score"], stats["not_outs"]) == (11, 3, 6, 1)
    assert stats["average"] == 5.5
    assert stats["strike_rate"] == round(11 / 24 * 100, 2)
    assert (stats["wickets"], stats["innings_bowl"], stats["runs_conceded"], stats["balls_bowled"]) == (2, 3, 15, 20)
    assert stats["best_bowling"] == "1/2"
    assert stats["economy"] == 4.5

    assert [h["result"] for h in profile["history"]] == ["W", "L", "T"]
    assert [h["opponent"] for h in profile["history"]] == ["Bravo", "Bravo", "Charlie"]
    assert profile["history"][0]["date"] == "2024-05-01"


def test_never_dismissed_average_is_runs():
    profile = career_profile([stats_row(1, 10, runs=7, balls=5)], {}, {})
    assert profile["stats"]["average"] == 7.0
    assert profile["history"] == []


def test_player_summaries_sorted_and_searchable():
    players = [Player(id=1, name="Arjun"), Player(id=2, name="Kabir"), Player(id=3, name="Rohan")]
    rows = [
        stats_row(1, 10, runs=4, out=True, player_id=1),
        stats_row(1, 20, runs=9, wickets=1, player_id=2),
        stats_row(2, 20, runs=3, out=True, player_id=2),
    ]
    summary = player_summaries(players, rows)
    assert [p["name"] for p in summary] == ["Kabir", "Arjun", "Rohan"]
    assert summary[0] == {"id": 2, "name": "Kabir", "matches": 2, "runs": 12, "wickets": 1, "average": 12.0}
    assert summary[2]["matches"] == 0

    assert [p["name"] for p in player_summaries(players, rows, search="AR")] == ["Arjun"]


def test_load_career_after_a_match(session, make_season, play_match):
    season = make_season(["Alpha", "Bravo"], players=["Arjun", "Kabir"])
    first = session.exec(select(Match).where(Match.season_id == season.id).order_by(Match.round_number)).first()
    play_match(first.id, ["1", "1", "W"], ["1", "W"])

    arjun = session.exec(select(Player).where(Player.name == "Arjun")).one()
    profile = load_career(session, arjun.id)

    assert profile["player"] == {"id": arjun.id, "name": "Arjun"}
    assert profile["stats"]["runs"] == 2
    assert profile["stats"]["wickets"] == 1
    assert profile["history"][0]["result"] == "W"
    assert profile["history"][0]["opponent"] == "Bravo"

    assert load_career(session, 999) is None


def test_players_are_shared_across_seasons(session, make_season):
    make_season(["Alpha", "Bravo"], players=["Arjun", "Kabir"], name="One")
    make_season(["Lions", "Tigers"], players=["Arjun", "Rohan"], name="Two")
    names = sorted(p.name for p in session.exec(select(Player)).all())
    assert names == ["Arjun", "Kabir", "Rohan"]
