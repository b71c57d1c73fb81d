import logging
from typing import Tuple

from scorekeeper.models import DEFAULT_ROSTER_SIZE, PHASES, PLAYING, SETUP, Session
from .errors import StateError
from .persistence import PersistenceAdapter
from .ranking import RankedPlayer, rank
from .roster import PlayerRoster, clamp_roster_size, parse_magnitude

logger = logging.getLogger(__name__)


class SessionController:
    """Single owner of the scoreboard session.

    Every mutation updates the roster first and then saves the whole
    snapshot through the persistence adapter. Requests that the current
    phase does not allow are ignored.
    """

    def __init__(self, persistence: PersistenceAdapter, default_size: int = DEFAULT_ROSTER_SIZE,
                 roster_factory=PlayerRoster):
        self.persistence = persistence
        self._roster_factory = roster_factory
        self.phase = SETUP
        self.roster = roster_factory(size=clamp_roster_size(default_size))
        self.reload()

    def reload(self) -> bool:
        """Re-read persistence. Returns False when nothing was restored.

        With no stored session the controller starts over in setup with
        default players, keeping the last known roster size.
        """
        session = self.persistence.load()
        if session is None:
            size = self.roster.size
            self.roster = self._roster_factory(size=size)
            self.phase = SETUP
            logger.info(f"[session-new] size={size}")
            return False
        self.roster = self._roster_factory(players=session.players)
        self.phase = session.phase
        logger.info(f"[session-restore] size={self.roster.size} phase={self.phase}")
        return True

    @property
    def session(self) -> Session:
        return Session(phase=self.phase, players=list(self.roster.players))

    def _persist(self) -> None:
        self.persistence.save(self.session)

    def _require_phase(self, phase: str, action: str) -> None:
        if self.phase != phase:
            raise StateError(f'{action} is only allowed in {phase}, current phase is {self.phase}')

    def get_snapshot(self) -> Session:
        return self.session

    def rank(self) -> Tuple[RankedPlayer, ...]:
        return rank(self.roster.players)

    def resize(self, n) -> bool:
        try:
            self._require_phase(SETUP, 'resize')
        except StateError as exc:
            logger.info(f"[state-skip] {exc}")
            return False
        if not self.roster.resize(n):
            return False
        self._persist()
        return True

    def rename(self, player_id, text) -> bool:
        if not self.roster.rename(player_id, text):
            return False
        self._persist()
        return True

    def adjust_score(self, player_id, magnitude, direction) -> bool:
        if not self.roster.adjust_score(player_id, magnitude, direction):
            return False
        self._persist()
        return True

    def adjust_score_text(self, player_id, text, direction) -> bool:
        magnitude = parse_magnitude(text)
        if magnitude is None:
            logger.debug(f"[score-skip] player={player_id!r} unparseable entry {text!r}")
            return False
        return self.adjust_score(player_id, magnitude, direction)

    def reset_all(self) -> None:
        """Zero every score and history, keeping names, ids and phase."""
        self.roster.reset_all()
        self.persistence.clear()
        self._persist()

    def set_phase(self, phase) -> bool:
        if phase not in PHASES:
            logger.debug(f"[phase-skip] unknown phase {phase!r}")
            return False
        self.phase = phase
        self._persist()
        return True

    def start(self) -> bool:
        return self.set_phase(PLAYING)

    def back_to_setup(self) -> bool:
        return self.set_phase(SETUP)
