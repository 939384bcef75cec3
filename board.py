"""
Board model for the hex pursuit game.

A hexagonal board of radius N centred on the origin. A cell is in bounds when
|q|, |r| and |s| are all at most N; cells with any component equal to N form
the border the cat tries to reach. The player can only block interior cells,
and blocks are never removed.
"""

from typing import Callable, Iterable, List, Optional, Set
from models import HexPosition


class InvalidMoveError(Exception):
    """Exception raised when a cell cannot be blocked."""
    pass


class HexBoard:
    def __init__(self, size: int, blocked: Optional[Iterable[HexPosition]] = None):
        """Create a board of the given radius, optionally with pre-blocked cells."""
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise ValueError(f"Board size must be a positive integer, got {size!r}")
        self.size = size
        self._blocked: Set[HexPosition] = set(blocked or [])

    def __repr__(self) -> str:
        return f"HexBoard(size={self.size}, blocked={len(self._blocked)})"

    @property
    def blocked_positions(self) -> List[HexPosition]:
        """Blocked cells in a stable (q, r) order."""
        return sorted(self._blocked)

    def is_in_bounds(self, position: HexPosition) -> bool:
        return (abs(position.q) <= self.size
                and abs(position.r) <= self.size
                and abs(position.s) <= self.size)

    def is_at_border(self, position: HexPosition) -> bool:
        """Check if the position lies on the escape rim."""
        return (abs(position.q) == self.size
                or abs(position.r) == self.size
                or abs(position.s) == self.size)

    def is_blocked(self, position: HexPosition) -> bool:
        return position in self._blocked

    def is_valid_move(self, position: HexPosition) -> bool:
        """A player may block in-bounds, non-border, unblocked cells."""
        return (self.is_in_bounds(position)
                and not self.is_at_border(position)
                and not self.is_blocked(position))

    def get_adjacent_positions(self, position: HexPosition) -> List[HexPosition]:
        """
        Get the free neighbours of a position.

        Args:
            position: Cell to look around

        Returns:
            In-bounds, unblocked neighbours in HEX_DIRECTIONS order (0 to 6 cells)
        """
        return [neighbor for neighbor in position.neighbors()
                if self.is_in_bounds(neighbor) and not self.is_blocked(neighbor)]

    def block(self, position: HexPosition) -> None:
        """Block a cell permanently. Raises InvalidMoveError for illegal cells."""
        if not self.is_in_bounds(position):
            raise InvalidMoveError(f"Cell ({position.q}, {position.r}) is outside the board")
        if self.is_at_border(position):
            raise InvalidMoveError(f"Cell ({position.q}, {position.r}) is on the border")
        if self.is_blocked(position):
            raise InvalidMoveError(f"Cell ({position.q}, {position.r}) is already blocked")
        self._blocked.add(position)

    def all_positions(self) -> List[HexPosition]:
        """Every in-bounds cell, ordered by r then q (row order for rendering)."""
        n = self.size
        positions = []
        for r in range(-n, n + 1):
            for q in range(max(-n, -n - r), min(n, n - r) + 1):
                positions.append(HexPosition(q, r))
        return positions

    def get_positions_where(self, condition: Callable[[HexPosition], bool]) -> List[HexPosition]:
        """Interior cells matching a predicate."""
        return [pos for pos in self.all_positions()
                if not self.is_at_border(pos) and condition(pos)]

    def copy(self) -> 'HexBoard':
        return HexBoard(self.size, self._blocked)
