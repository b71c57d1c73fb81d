from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from scorekeeper.services.scoreboard.errors import ValidationError

SETUP = 'setup'
PLAYING = 'playing'
PHASES = (SETUP, PLAYING)

ADD = 'add'
SUBTRACT = 'subtract'

ROSTER_SIZES = (2, 3, 4)
DEFAULT_ROSTER_SIZE = 2


def default_name(player_id: int) -> str:
    return f"Player {player_id}"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class HistoryEntry:
    points: int
    timestamp: str
    kind: str

    def to_dict(self):
        return {
            'points': self.points,
            'timestamp': self.timestamp,
            'type': self.kind,
        }

    @classmethod
    def from_dict(cls, data) -> 'HistoryEntry':
        if not isinstance(data, dict):
            raise ValidationError('history entry must be an object')
        points = data.get('points')
        timestamp = data.get('timestamp')
        kind = data.get('type')
        if not _is_int(points) or points == 0:
            raise ValidationError(f'bad history points: {points!r}')
        if not isinstance(timestamp, str):
            raise ValidationError(f'bad history timestamp: {timestamp!r}')
        if kind not in (ADD, SUBTRACT):
            raise ValidationError(f'bad history type: {kind!r}')
        return cls(points=points, timestamp=timestamp, kind=kind)


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    score: int = 0
    history: Tuple[HistoryEntry, ...] = ()

    @classmethod
    def fresh(cls, player_id: int) -> 'Player':
        return cls(id=player_id, name=default_name(player_id))

    def with_changes(self, **changes) -> 'Player':
        return replace(self, **changes)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'history': [entry.to_dict() for entry in self.history],
        }

    @classmethod
    def from_dict(cls, data) -> 'Player':
        if not isinstance(data, dict):
            raise ValidationError('player must be an object')
        player_id = data.get('id')
        name = data.get('name')
        score = data.get('score')
        history = data.get('history')
        if not _is_int(player_id):
            raise ValidationError(f'bad player id: {player_id!r}')
        if not isinstance(name, str):
            raise ValidationError(f'bad name for player {player_id}')
        if not _is_int(score) or score < 0:
            raise ValidationError(f'bad score for player {player_id}: {score!r}')
        if not isinstance(history, list):
            raise ValidationError(f'bad history for player {player_id}')
        return cls(
            id=player_id,
            name=name.strip() or default_name(player_id),
            score=score,
            history=tuple(HistoryEntry.from_dict(h) for h in history),
        )


@dataclass
class Session:
    """Process-wide scoreboard state: the phase and the ordered roster."""

    phase: str = SETUP
    players: List[Player] = field(default_factory=list)

    @property
    def roster_size(self) -> int:
        return len(self.players)

    def to_dict(self, saved_at: Optional[int] = None):
        payload = {
            'players': [p.to_dict() for p in self.players],
            'phase': self.phase,
        }
        if saved_at is not None:
            payload['savedAt'] = saved_at
        return payload

    @classmethod
    def from_dict(cls, data) -> 'Session':
        """Rebuild a session from a persisted envelope.

        Raises ValidationError unless the players are 2..4 well-formed
        entries with ids exactly 1..n. A missing phase means setup.
        """
        if not isinstance(data, dict):
            raise ValidationError('snapshot must be an object')
        raw_players = data.get('players')
        if not isinstance(raw_players, list) or len(raw_players) not in ROSTER_SIZES:
            raise ValidationError('snapshot has no valid player list')
        players = [Player.from_dict(p) for p in raw_players]
        if [p.id for p in players] != list(range(1, len(players) + 1)):
            raise ValidationError('player ids are not contiguous from 1')
        phase = data.get('phase') or SETUP
        if phase not in PHASES:
            raise ValidationError(f'unknown phase: {phase!r}')
        return cls(phase=phase, players=players)
