# gully_backend/services/career.py
# Career numbers for players, folded from their MatchPlayerStats rows.

from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from gully_backend.core.nrr import run_rate
from gully_backend.models.match_model import Match, MatchPlayerStats
from gully_backend.models.player_model import Player
from gully_backend.models.season_model import Team


def _average(runs: int, dismissals: int) -> float:
    # Never dismissed: the average is just the runs
    if dismissals > 0:
        return round(runs / dismissals, 2)
    return float(runs)


def player_summaries(players: Iterable[Player], rows: Iterable[MatchPlayerStats], search: Optional[str] = None) -> List[dict]:
    """Players list: matches, runs, wickets and average, most runs first."""
    totals: Dict[int, dict] = {}
    for row in rows:
        t = totals.setdefault(row.player_id, {"matches": 0, "runs": 0, "wickets": 0, "outs": 0})
        t["matches"] += 1
        t["runs"] += row.runs_scored or 0
        t["wickets"] += row.wickets_taken or 0
        if row.is_out:
            t["outs"] += 1

    summary = []
    for player in players:
        if search and search.lower() not in player.name.lower():
            continue
        t = totals.get(player.id, {"matches": 0, "runs": 0, "wickets": 0, "outs": 0})
        summary.append({
            "id": player.id,
            "name": player.name,
            "matches": t["matches"],
            "runs": t["runs"],
            "wickets": t["wickets"],
            "average": _average(t["runs"], t["outs"]),
        })

    summary.sort(key=lambda p: -p["runs"])
    return summary


def career_profile(rows: Iterable[MatchPlayerStats], matches: Dict[int, Match], team_names: Dict[int, str]) -> dict:
    """
    Career aggregates for one player.

    - A batting innings is any match where the player faced a ball or got out
    - A bowling innings is any match with at least one legal ball bowled
    - Best bowling: more wickets first, then fewer runs
    """
    rows = list(rows)
    stats = {
        "matches": len(rows),
        "runs": 0, "innings_bat": 0, "high_score": 0, "not_outs": 0,
        "average": 0.0, "strike_rate": 0.0,
        "wickets": 0, "innings_bowl": 0, "runs_conceded": 0, "balls_bowled": 0,
        "economy": 0.0, "best_bowling": "0/0",
    }
    best_wickets, best_runs = -1, None
    balls_faced = 0
    history = []

    for row in rows:
        balls_faced += row.balls_faced or 0

        if row.balls_faced > 0 or row.is_out:
            stats["innings_bat"] += 1
            stats["runs"] += row.runs_scored
            stats["high_score"] = max(stats["high_score"], row.runs_scored)
            if not row.is_out:
                stats["not_outs"] += 1

        if row.legal_balls_bowled > 0:
            stats["innings_bowl"] += 1
            stats["wickets"] += row.wickets_taken
            stats["runs_conceded"] += row.runs_conceded
            stats["balls_bowled"] += row.legal_balls_bowled

            if row.wickets_taken > best_wickets or (
                row.wickets_taken == best_wickets and row.runs_conceded < best_runs
            ):
                best_wickets, best_runs = row.wickets_taken, row.runs_conceded
                stats["best_bowling"] = f"{best_wickets}/{best_runs}"

        match = matches.get(row.match_id)
        if match:
            opponent_id = match.other_team(row.team_id)
            if match.winner_id == row.team_id:
                result = "W"
            elif match.winner_id is not None:
                result = "L"
            else:
                result = "T"
            history.append({
                "match_id": match.id,
                "date": match.created_at.date().isoformat() if match.created_at else None,
                "opponent": team_names.get(opponent_id, "Unknown"),
                "runs": row.runs_scored,
                "wickets": row.wickets_taken,
                "result": result,
            })

    stats["average"] = _average(stats["runs"], stats["innings_bat"] - stats["not_outs"])
    stats["strike_rate"] = round(stats["runs"] / balls_faced * 100, 2) if balls_faced > 0 else 0.0
    stats["economy"] = round(run_rate(stats["runs_conceded"], stats["balls_bowled"]), 2)

    return {"stats": stats, "history": history}


def load_career(session: Session, player_id: int) -> Optional[dict]:
    """Player profile with career aggregates and match history, newest first."""
    player = session.get(Player, player_id)
    if not player:
        return None

    rows = session.exec(
        select(MatchPlayerStats)
        .where(MatchPlayerStats.player_id == player_id)
        .order_by(MatchPlayerStats.created_at.desc())
    ).all()

    match_ids = {r.match_id for r in rows}
    matches = {m.id: m for m in session.exec(select(Match).where(Match.id.in_(match_ids))).all()} if match_ids else {}

    team_ids = {t for m in matches.values() for t in (m.team_a_id, m.team_b_id)}
    team_names = {t.id: t.name for t in session.exec(select(Team).where(Team.id.in_(team_ids))).all()} if team_ids else {}

    profile = career_profile(rows, matches, team_names)
    profile["player"] = {"id": player.id, "name": player.name}
    return profile
