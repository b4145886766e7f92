# gully_backend/services/standings.py
"""
Season tables: points table (with NRR), batting and bowling leaderboards.

Pure fold over a season's matches. Works on anything shaped like the ORM
rows: matches expose team_a_id / team_b_id / winner_id / is_completed /
innings, innings expose batting_team_id / total_runs / total_wickets /
legal_balls_bowled, teams expose id / name.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List

from gully_backend.core.match_config import NRR_ALL_OUT_BALLS, POINTS_TIE, POINTS_WIN
from gully_backend.core.nrr import calculate_nrr, run_rate


@dataclass
class TeamStanding:
    team_id: int
    name: str
    played: int = 0
    won: int = 0
    lost: int = 0
    draw: int = 0
    points: int = 0
    runs_scored: int = 0
    balls_faced: int = 0
    runs_conceded: int = 0
    balls_bowled: int = 0
    nrr: float = 0.0


@dataclass
class BattingRow:
    team_id: int
    name: str
    innings: int = 0
    runs: int = 0
    balls: int = 0
    strike_rate: float = 0.0
    highest_score: int = 0
    not_outs: int = 0


@dataclass
class BowlingRow:
    team_id: int
    name: str
    innings: int = 0
    wickets: int = 0
    runs: int = 0
    balls: int = 0
    economy: float = 0.0
    best_figures: str = "0/0"
    best_wickets: int = 0
    best_runs: int = 0


@dataclass
class SeasonStats:
    standings: List[TeamStanding]
    batting: List[BattingRow]
    bowling: List[BowlingRow]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standings": [asdict(r) for r in self.standings],
            "batting": [asdict(r) for r in self.batting],
            "bowling": [asdict(r) for r in self.bowling],
        }


def nrr_balls(innings) -> int:
    """Balls credited for NRR: losing the only wicket counts as the full quota."""
    if innings.total_wickets >= 1:
        return NRR_ALL_OUT_BALLS
    return innings.legal_balls_bowled


def _apply_points(table: Dict[int, TeamStanding], match) -> None:
    team_a = table.get(match.team_a_id)
    team_b = table.get(match.team_b_id)
    if team_a is None or team_b is None:
        return

    team_a.played += 1
    team_b.played += 1
    if match.winner_id == match.team_a_id:
        team_a.won += 1
        team_a.points += POINTS_WIN
        team_b.lost += 1
    elif match.winner_id == match.team_b_id:
        team_b.won += 1
        team_b.points += POINTS_WIN
        team_a.lost += 1
    else:
        team_a.draw += 1
        team_b.draw += 1
        team_a.points += POINTS_TIE
        team_b.points += POINTS_TIE


def calculate_stats(matches: Iterable, teams: Iterable) -> SeasonStats:
    """Only completed matches count towards any of the three tables."""
    table: Dict[int, TeamStanding] = {}
    batting: Dict[int, BattingRow] = {}
    bowling: Dict[int, BowlingRow] = {}

    for team in teams:
        table[team.id] = TeamStanding(team_id=team.id, name=team.name)
        batting[team.id] = BattingRow(team_id=team.id, name=team.name)
        bowling[team.id] = BowlingRow(team_id=team.id, name=team.name)

    for match in matches:
        if not match.is_completed:
            continue

        _apply_points(table, match)

        for inn in match.innings or []:
            batter_id = inn.batting_team_id
            bowler_id = match.team_b_id if batter_id == match.team_a_id else match.team_a_id

            bat = batting.get(batter_id)
            if bat:
                bat.innings += 1
                bat.runs += inn.total_runs
                bat.balls += inn.legal_balls_bowled
                bat.highest_score = max(bat.highest_score, inn.total_runs)
                if inn.total_wickets == 0:
                    bat.not_outs += 1

            bowl = bowling.get(bowler_id)
            if bowl:
                bowl.innings += 1
                bowl.runs += inn.total_runs
                bowl.wickets += inn.total_wickets
                bowl.balls += inn.legal_balls_bowled

                # More wickets is better; equal wickets, fewer runs is better
                if inn.total_wickets > bowl.best_wickets or (
                    inn.total_wickets == bowl.best_wickets and inn.total_runs < bowl.best_runs
                ):
                    bowl.best_wickets = inn.total_wickets
                    bowl.best_runs = inn.total_runs
                    bowl.best_figures = f"{inn.total_wickets}/{inn.total_runs}"

            # NRR aggregates
            if batter_id in table:
                table[batter_id].runs_scored += inn.total_runs
                table[batter_id].balls_faced += nrr_balls(inn)
            if bowler_id in table:
                table[bowler_id].runs_conceded += inn.total_runs
                table[bowler_id].balls_bowled += nrr_balls(inn)

    for row in table.values():
        row.nrr = calculate_nrr(row.runs_scored, row.balls_faced, row.runs_conceded, row.balls_bowled)
    for row in batting.values():
        row.strike_rate = (row.runs / row.balls) * 100 if row.balls > 0 else 0.0
    for row in bowling.values():
        row.economy = run_rate(row.runs, row.balls)

    # sorted() is stable: full ties keep the input (team) order
    standings = sorted(table.values(), key=lambda r: (-r.points, -r.nrr))
    batting_board = sorted(batting.values(), key=lambda r: -r.runs)
    bowling_board = sorted(bowling.values(), key=lambda r: (-r.wickets, r.economy))

    return SeasonStats(standings=standings, batting=batting_board, bowling=bowling_board)
