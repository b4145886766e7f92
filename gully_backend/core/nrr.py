# gully_backend/core/nrr.py
from gully_backend.core.match_config import BALLS_PER_OVER, NRR_DECIMALS


def balls_to_overs_float(balls: int) -> float:
    if balls <= 0:
        return 0.0
    return balls / float(BALLS_PER_OVER)


def balls_to_overs(balls: int) -> str:
    """Cricket overs notation: 10 balls -> "1.4"."""
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def run_rate(runs: int, balls: int) -> float:
    overs = balls_to_overs_float(balls)
    if overs == 0.0:
        return 0.0
    return runs / overs


def calculate_nrr(runs_scored: int, balls_faced: int, runs_conceded: int, balls_bowled: int) -> float:
    """
    Net Run Rate = (runs scored / overs faced) - (runs conceded / overs bowled)

    A side with no legal balls contributes a run rate of 0 instead of failing.
    """
    rr_for = run_rate(runs_scored, balls_faced)
    rr_against = run_rate(runs_conceded, balls_bowled)
    return round(rr_for - rr_against, NRR_DECIMALS)
