# Models for the hex pursuit game: axial coordinates and game status

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


# 6 directions in axial coordinates; order matters for tie-breaking
HEX_DIRECTIONS: List[Tuple[int, int]] = [(1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1)]


class GameStatus(Enum):
    IN_PROGRESS = "IN_PROGRESS"
    PLAYER_WON = "PLAYER_WON"  # cat trapped
    PLAYER_LOST = "PLAYER_LOST"  # cat reached the border


@dataclass(frozen=True, order=True)
class HexPosition:
    """
    A cell on the hex grid in axial coordinates.

    The cube component s is derived as -q - r, so q + r + s == 0 always holds.
    Two positions are equal when q and r match.
    """
    q: int  # Axial coordinate q
    r: int  # Axial coordinate r
    s: int = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, 's', -self.q - self.r)
        assert self.q + self.r + self.s == 0, f"Broken hex invariant at ({self.q}, {self.r})"

    def distance_to(self, other: 'HexPosition') -> int:
        """Hex distance: the largest absolute difference across q, r and s."""
        return max(abs(self.q - other.q), abs(self.r - other.r), abs(self.s - other.s))

    def neighbors(self) -> List['HexPosition']:
        """All 6 neighbours in direction order, without any bounds check."""
        return [HexPosition(self.q + dq, self.r + dr) for dq, dr in HEX_DIRECTIONS]

    def to_dict(self) -> Dict[str, int]:
        return {'q': self.q, 'r': self.r}

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> 'HexPosition':
        return cls(int(data['q']), int(data['r']))


ORIGIN = HexPosition(0, 0)


def hex_distance(a: HexPosition, b: HexPosition) -> int:
    """
    Calculate distance between two hexes using axial coordinates.

    Args:
        a: First hex
        b: Second hex

    Returns:
        Number of single steps between the hexes on an open grid
    """
    return a.distance_to(b)
