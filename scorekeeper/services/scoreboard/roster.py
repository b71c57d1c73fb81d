import logging
import re
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from scorekeeper.models import (
    ADD,
    DEFAULT_ROSTER_SIZE,
    ROSTER_SIZES,
    SUBTRACT,
    HistoryEntry,
    Player,
    default_name,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)

INCREASE = 'increase'
DECREASE = 'decrease'
DIRECTIONS = {INCREASE: ADD, DECREASE: SUBTRACT}

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def parse_magnitude(text) -> Optional[int]:
    """Parse free-text custom score entry.

    Only the leading integer counts, so "12abc" is 12 and "3.9" is 3.
    Returns None unless the result is a positive integer.
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text if text > 0 else None
    if not isinstance(text, str):
        return None
    match = _LEADING_INT.match(text)
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


def clamp_roster_size(n) -> int:
    """Snap n to the nearest allowed roster size. Raises ValidationError for non-integers."""
    if isinstance(n, bool):
        raise ValidationError(f'roster size must be an integer, got {n!r}')
    try:
        n = int(n)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f'roster size must be an integer, got {n!r}')
    return max(ROSTER_SIZES[0], min(ROSTER_SIZES[-1], n))


def _timestamp() -> str:
    return datetime.now().strftime('%H:%M:%S')


class PlayerRoster:
    """Ordered players with their scores and action history.

    Players are immutable records; every mutation swaps in a replaced
    record so snapshots handed out earlier never change underneath callers.
    """

    def __init__(self, players: Optional[List[Player]] = None, size: int = DEFAULT_ROSTER_SIZE,
                 timestamp: Callable[[], str] = _timestamp):
        if players:
            self._players = list(players)
        else:
            self._players = [Player.fresh(i) for i in range(1, clamp_roster_size(size) + 1)]
        self._timestamp = timestamp

    @property
    def players(self) -> Tuple[Player, ...]:
        return tuple(self._players)

    @property
    def size(self) -> int:
        return len(self._players)

    def get(self, player_id) -> Optional[Player]:
        for p in self._players:
            if p.id == player_id:
                return p
        return None

    def _replace(self, player: Player) -> None:
        self._players = [player if p.id == player.id else p for p in self._players]

    def resize(self, n) -> bool:
        try:
            size = clamp_roster_size(n)
        except ValidationError as exc:
            logger.debug(f"[resize-skip] {exc}")
            return False
        existing = {p.id: p for p in self._players}
        self._players = [existing.get(i) or Player.fresh(i) for i in range(1, size + 1)]
        return True

    def rename(self, player_id, text) -> bool:
        player = self.get(player_id)
        if player is None:
            logger.debug(f"[rename-skip] unknown player {player_id!r}")
            return False
        name = text.strip() if isinstance(text, str) else ''
        self._replace(player.with_changes(name=name or default_name(player.id)))
        return True

    def adjust_score(self, player_id, magnitude, direction) -> bool:
        """Apply +magnitude or -magnitude, clamping the score at zero.

        History records the requested delta, not the clamped one. Bad
        magnitude, direction or id leaves the roster untouched.
        """
        try:
            self._validate_adjustment(magnitude, direction)
        except ValidationError as exc:
            logger.debug(f"[score-skip] player={player_id!r} {exc}")
            return False
        player = self.get(player_id)
        if player is None:
            logger.debug(f"[score-skip] unknown player {player_id!r}")
            return False

        delta = magnitude if direction == INCREASE else -magnitude
        entry = HistoryEntry(points=delta, timestamp=self._timestamp(), kind=DIRECTIONS[direction])
        self._replace(player.with_changes(
            score=max(0, player.score + delta),
            history=player.history + (entry,),
        ))
        return True

    @staticmethod
    def _validate_adjustment(magnitude, direction) -> None:
        if isinstance(magnitude, bool) or not isinstance(magnitude, int):
            raise ValidationError(f'magnitude must be an integer, got {magnitude!r}')
        if magnitude <= 0:
            raise ValidationError(f'magnitude must be positive, got {magnitude}')
        if not isinstance(direction, str) or direction not in DIRECTIONS:
            raise ValidationError(f'unknown direction {direction!r}')

    def reset_all(self) -> None:
        self._players = [p.with_changes(score=0, history=()) for p in self._players]

    def recent_history(self, player_id, limit: int = 2) -> Tuple[HistoryEntry, ...]:
        player = self.get(player_id)
        if player is None or limit <= 0:
            return ()
        return tuple(reversed(player.history[-limit:]))
