"""
Cat movement strategies for the hex pursuit game.

Every strategy answers one question: given the board and the cat's cell,
which neighbouring cell should the cat step to next? Strategies keep no state
between calls and never mutate the board they are handed.

- RandomStrategy: uniform pick among free neighbours (easy tiers)
- BFSStrategy: shortest step count to any border cell (medium tiers)
- AStarStrategy: A* toward an explicit escape target (hard tiers)
"""

import heapq
import itertools
import logging
import random
from collections import deque
from typing import Callable, Dict, List, Optional, Tuple, Union

from board import HexBoard
from models import HexPosition, hex_distance
from state import load_config

logger = logging.getLogger(__name__)

DIFFICULTY_NAMES = {'easy': 2, 'medium': 5, 'hard': 9}
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10


def possible_moves(board: HexBoard, position: HexPosition) -> List[HexPosition]:
    """Free neighbours of a cell, in direction order."""
    return board.get_adjacent_positions(position)


def distance_to_border(board: HexBoard, position: HexPosition) -> int:
    """Steps from a cell to the nearest border cell on an open board."""
    return board.size - max(abs(position.q), abs(position.r), abs(position.s))


def default_target(board: HexBoard) -> HexPosition:
    """Escape target used for A*: the border cell straight along +q."""
    return HexPosition(board.size, 0)


def path_cost(path: List[HexPosition]) -> int:
    """Unit step cost: number of steps in the path."""
    return len(path) - 1 if path else 0


def reconstruct_path(came_from: Dict[HexPosition, Optional[HexPosition]],
                     goal: HexPosition) -> List[HexPosition]:
    """Walk back-pointers from the goal to the start and reverse."""
    path = []
    current: Optional[HexPosition] = goal
    while current is not None:
        path.append(current)
        current = came_from[current]
    path.reverse()
    return path


class MovementStrategy:
    """Base class for cat movement strategies."""
    name: str = "base"

    def select_move(self, board: HexBoard, current: HexPosition,
                    target: Optional[HexPosition] = None) -> Optional[HexPosition]:
        """Return the cat's next cell, or None when it has nowhere to go."""
        raise NotImplementedError


class RandomStrategy(MovementStrategy):
    """Moves to a random free neighbour."""
    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select_move(self, board: HexBoard, current: HexPosition,
                    target: Optional[HexPosition] = None) -> Optional[HexPosition]:
        moves = possible_moves(board, current)
        if not moves:
            return None
        return self.rng.choice(moves)


class BFSStrategy(MovementStrategy):
    """
    Breadth-first search toward the nearest border cell.

    Each candidate first step is scored by the length of its own shortest
    escape path; the shortest wins and ties go to the earlier direction.
    """
    name = "bfs"

    @staticmethod
    def find_path(board: HexBoard, start: HexPosition,
                  target: Optional[HexPosition] = None) -> List[HexPosition]:
        """
        Shortest path from start to the target, or to any border cell.

        Args:
            board: Board to search (read only)
            start: First cell of the path
            target: Cell to reach; None means any border cell

        Returns:
            Cells from start to goal inclusive, or an empty list if unreachable
        """
        if target is not None:
            is_goal: Callable[[HexPosition], bool] = lambda pos: pos == target
        else:
            is_goal = board.is_at_border

        came_from: Dict[HexPosition, Optional[HexPosition]] = {start: None}
        queue = deque([start])

        while queue:
            current = queue.popleft()
            if is_goal(current):
                return reconstruct_path(came_from, current)
            for neighbor in possible_moves(board, current):
                if neighbor not in came_from:
                    came_from[neighbor] = current
                    queue.append(neighbor)

        return []

    def select_move(self, board: HexBoard, current: HexPosition,
                    target: Optional[HexPosition] = None) -> Optional[HexPosition]:
        best_move = None
        best_length = None
        for move in possible_moves(board, current):
            path = self.find_path(board, move)
            if not path:
                continue
            # strict comparison keeps the earliest direction on ties
            if best_length is None or len(path) < best_length:
                best_move, best_length = move, len(path)
        return best_move


class AStarStrategy(MovementStrategy):
    """
    A* toward an explicit escape target with hex distance as the heuristic.

    If the target can no longer be reached from any neighbour, the search
    falls back to "any border cell" so the cat keeps running while an exit
    exists.
    """
    name = "astar"

    @staticmethod
    def find_path(board: HexBoard, start: HexPosition,
                  target: Optional[HexPosition] = None) -> List[HexPosition]:
        """
        A* pathfinding algorithm for the hex board.

        Args:
            board: Board to search (read only)
            start: Starting cell
            target: Goal cell; None means any border cell

        Returns:
            Cells from start to goal inclusive, or an empty list if no path found
        """
        if target is not None:
            is_goal: Callable[[HexPosition], bool] = lambda pos: pos == target
            heuristic: Callable[[HexPosition], int] = lambda pos: hex_distance(pos, target)
        else:
            is_goal = board.is_at_border
            heuristic = lambda pos: distance_to_border(board, pos)

        counter = itertools.count()
        open_heap: List[Tuple[int, int, int, HexPosition]] = []
        heapq.heappush(open_heap, (heuristic(start), 0, next(counter), start))
        came_from: Dict[HexPosition, Optional[HexPosition]] = {start: None}
        g_score = {start: 0}
        closed = set()

        while open_heap:
            _, g, _, current = heapq.heappop(open_heap)
            if is_goal(current):
                return reconstruct_path(came_from, current)
            if current in closed:
                continue
            closed.add(current)

            for neighbor in possible_moves(board, current):
                tentative_g = g + 1
                if tentative_g < g_score.get(neighbor, float('inf')):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    heapq.heappush(open_heap,
                                   (tentative_g + heuristic(neighbor), tentative_g, next(counter), neighbor))

        return []

    def _best_first_step(self, board: HexBoard, current: HexPosition,
                         target: Optional[HexPosition]) -> Optional[HexPosition]:
        candidates = []
        for index, move in enumerate(possible_moves(board, current)):
            path = self.find_path(board, move, target)
            if path:
                # lowest total cost, then shortest path, then direction order
                candidates.append((1 + path_cost(path), len(path), index, move))
        if not candidates:
            return None
        return min(candidates)[3]

    def select_move(self, board: HexBoard, current: HexPosition,
                    target: Optional[HexPosition] = None) -> Optional[HexPosition]:
        move = self._best_first_step(board, current, target)
        if move is None and target is not None:
            logger.debug("Target (%d, %d) unreachable from (%d, %d), heading for any border",
                         target.q, target.r, current.q, current.r)
            move = self._best_first_step(board, current, None)
        return move


def resolve_difficulty(value: Union[int, str, None]) -> int:
    """
    Turn a difficulty given as a number or a tier name into a level 1-10.

    Raises:
        ValueError: for unknown names or levels outside 1-10
    """
    if value is None:
        return int(load_config()['default_difficulty'])
    if isinstance(value, bool):
        raise ValueError(f"Invalid difficulty: {value!r}")
    if isinstance(value, str):
        name = value.strip().lower()
        if name in DIFFICULTY_NAMES:
            return DIFFICULTY_NAMES[name]
        try:
            value = int(name)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}")
    if not isinstance(value, int):
        raise ValueError(f"Invalid difficulty: {value!r}")
    if not MIN_DIFFICULTY <= value <= MAX_DIFFICULTY:
        raise ValueError(f"Difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}")
    return value


def strategy_for_difficulty(level: int, rng: Optional[random.Random] = None,
                            config: Optional[Dict[str, int]] = None) -> MovementStrategy:
    """Pick the cat's strategy for a difficulty level: random, then BFS, then A*."""
    config = config or load_config()
    if level <= config['random_max_difficulty']:
        return RandomStrategy(rng)
    if level <= config['bfs_max_difficulty']:
        return BFSStrategy()
    return AStarStrategy()
