# gully_backend/services/events.py
"""
In-process event feed.

The scorer publishes what happened (a ball was stored, a match finished);
whoever cares subscribes. Handlers run synchronously in subscription order.
A failing handler is logged and never undoes the committed ball.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List, Optional, Type

from gully_backend.core.logger import get_logger
from gully_backend.core.match_phase import MatchPhase

logger = get_logger(__name__)


@dataclass(frozen=True)
class BallRecorded:
    match_id: int
    innings_id: int
    ball_index: int
    total_runs: int
    total_wickets: int
    legal_balls_bowled: int


@dataclass(frozen=True)
class MatchCompleted:
    match_id: int
    season_id: int
    round_number: int
    phase: MatchPhase
    winner_id: Optional[int]
    message: str


Handler = Callable[[object], None]


class EventBus:
    def __init__(self):
        self._handlers: DefaultDict[type, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: object) -> None:
        for handler in list(self._handlers[type(event)]):
            try:
                handler(event)
            except Exception:
                logger.exception(f"❌ Event handler failed for {type(event).__name__}")
