from typing import Iterable, NamedTuple, Tuple

from scorekeeper.models import Player


class RankedPlayer(NamedTuple):
    rank: int
    player: Player

    def to_dict(self):
        return {
            'rank': self.rank,
            'id': self.player.id,
            'name': self.player.name,
            'score': self.player.score,
        }


def rank(players: Iterable[Player]) -> Tuple[RankedPlayer, ...]:
    """Order players by score, highest first.

    sorted() is stable, so tied players keep their input order (id order
    for a roster). Ranks are positional: [5, 5, 1] ranks 1, 2, 3.
    """
    ordered = sorted(players, key=lambda p: p.score, reverse=True)
    return tuple(RankedPlayer(idx, p) for idx, p in enumerate(ordered, start=1))
