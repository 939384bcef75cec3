"""
Game state management for the hex pursuit game ("trap the cat").

One GameState is one game: a board of radius N, the cat's cell, a move
counter and a status. Each player turn blocks one cell, then the cat answers
with a single step chosen by a movement strategy.

Status polarity: the player WINS when the cat is trapped and LOSES when the
cat reaches the border.
"""

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from board import HexBoard, InvalidMoveError
from models import ORIGIN, GameStatus, HexPosition

logger = logging.getLogger(__name__)

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'default_board_size': 5,
    'default_difficulty': 5,
    'max_board_size': 15,
    'random_max_difficulty': 4,
    'bfs_max_difficulty': 7,
    'leaderboard_limit': 10,
}


class GameTerminalError(Exception):
    """Exception raised when a move is attempted on a finished game."""
    pass


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load tunables from config.json, falling back to built-in defaults.

    Args:
        path: Config file to read (default: config.json next to this module)

    Returns:
        Defaults overlaid with whatever the file provides
    """
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path or CONFIG_PATH, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class GameState:
    """
    Complete state of a single game.

    The board is exclusively owned by this state; strategies only read it.
    """
    game_id: str  # Unique game identifier
    board: HexBoard
    cat_position: HexPosition = ORIGIN  # Cat starts at the centre
    move_count: int = 0  # Completed player turns
    status: GameStatus = GameStatus.IN_PROGRESS
    difficulty: int = 5  # 1-10, selects the cat's strategy
    created_at: str = field(default_factory=_now)
    log: List[Dict[str, Any]] = field(default_factory=list)  # Event log for analysis

    @property
    def board_size(self) -> int:
        return self.board.size

    def is_finished(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    def has_player_won(self) -> bool:
        return self.status == GameStatus.PLAYER_WON

    def is_cat_at_border(self) -> bool:
        return self.board.is_at_border(self.cat_position)

    def is_cat_trapped(self) -> bool:
        """True when every neighbour of the cat is blocked or off the board."""
        return not self.board.get_adjacent_positions(self.cat_position)

    def can_execute_move(self, position: HexPosition) -> bool:
        if self.is_finished():
            return False
        if position == self.cat_position:
            return False
        return self.board.is_valid_move(position)

    def update_status(self) -> GameStatus:
        """Re-derive the status from the cat's cell: border loses, trapped wins."""
        if self.is_cat_at_border():
            self.status = GameStatus.PLAYER_LOST
        elif self.is_cat_trapped():
            self.status = GameStatus.PLAYER_WON
        else:
            self.status = GameStatus.IN_PROGRESS
        return self.status

    def apply_player_move(self, position: HexPosition, strategy,
                          target: Optional[HexPosition] = None) -> GameState:
        """
        Block a cell, then let the cat reply.

        Args:
            position: Cell the player wants to block
            strategy: MovementStrategy deciding the cat's reply
            target: Escape target handed to the strategy (A* uses it)

        Returns:
            This game state, updated

        Raises:
            GameTerminalError: if the game is already over
            InvalidMoveError: if the cell is the cat's, off-board, border or blocked
        """
        if self.is_finished():
            raise GameTerminalError(f"Game {self.game_id} is over ({self.status.value})")
        if position == self.cat_position:
            raise InvalidMoveError(f"Cell ({position.q}, {position.r}) is occupied by the cat")

        self.board.block(position)
        self.move_count += 1
        log_event(self, "Cell blocked", cell=position.to_dict())

        if self.update_status() == GameStatus.IN_PROGRESS:
            next_cell = strategy.select_move(self.board, self.cat_position, target)
            if next_cell is not None:
                self.cat_position = next_cell
                log_event(self, "Cat moved", cell=next_cell.to_dict(), strategy=strategy.name)
            self.update_status()

        if self.is_finished():
            log_event(self, "Game over", status=self.status.value, score=self.calculate_score())
            logger.info("Game %s finished: %s after %d moves", self.game_id, self.status.value, self.move_count)
        return self

    def calculate_score(self) -> int:
        """Winning scores reward few moves on big boards; losses get a small consolation."""
        if self.has_player_won():
            return max(0, 1000 - 10 * self.move_count + 50 * self.board_size)
        return max(0, 100 - 5 * self.move_count)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'boardSize': self.board_size,
            'moves': self.move_count,
            'status': self.status.value,
            'blockedCells': len(self.board.blocked_positions),
            'difficulty': self.difficulty,
            'catPosition': self.cat_position.to_dict(),
            'score': self.calculate_score(),
        }

    def snapshot(self) -> GameState:
        """Detached copy: later turns on this game do not show up in it."""
        return replace(self, board=self.board.copy(), log=[dict(entry) for entry in self.log])

    def to_dict(self) -> Dict[str, Any]:
        """Serializable snapshot for storage and transport."""
        return {
            'gameId': self.game_id,
            'catPosition': self.cat_position.to_dict(),
            'blockedCells': [pos.to_dict() for pos in self.board.blocked_positions],
            'status': self.status.value,
            'moveCount': self.move_count,
            'boardSize': self.board_size,
            'difficulty': self.difficulty,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameState:
        """
        Rebuild a game from to_dict() output.

        The status is restored as stored, not recomputed, since it records how
        the game ended.
        """
        board = HexBoard(int(data['boardSize']),
                         [HexPosition.from_dict(cell) for cell in data.get('blockedCells', [])])
        return cls(
            game_id=data['gameId'],
            board=board,
            cat_position=HexPosition.from_dict(data['catPosition']),
            move_count=int(data.get('moveCount', 0)),
            status=GameStatus(data.get('status', GameStatus.IN_PROGRESS.value)),
            difficulty=int(data.get('difficulty', DEFAULT_CONFIG['default_difficulty'])),
            created_at=data.get('createdAt') or _now(),
        )


def log_event(game_state: GameState, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'move': game_state.move_count,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def new_game(game_id: str, board_size: int, difficulty: int) -> GameState:
    """
    Initialize a new game: empty board, cat at the origin, status in progress.

    Args:
        game_id: Unique identifier for the game
        board_size: Board radius
        difficulty: Difficulty level 1-10

    Returns:
        New GameState ready for the first player move
    """
    game_state = GameState(game_id=game_id, board=HexBoard(board_size), difficulty=difficulty)
    log_event(game_state, "Game created", boardSize=board_size, difficulty=difficulty)
    return game_state
