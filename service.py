"""
Game orchestration for the hex pursuit game.

GameService is the only entry point the HTTP layer and the CLI use. It creates
games, turns player requests into state machine calls, picks the cat's
strategy from the game's difficulty, and keeps the score board.

Every move and every read of a game runs under that game's lock, and callers
get snapshots rather than the stored object, so nobody sees a half-applied
turn. Different games run independently.
"""

import logging
import random
import threading
import uuid
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Union

from models import GameStatus, HexPosition
from repository import InMemoryGameRepository
from state import DEFAULT_CONFIG, GameState, load_config, new_game
from strategies import AStarStrategy, default_target, resolve_difficulty, strategy_for_difficulty

logger = logging.getLogger(__name__)

MIN_BOARD_SIZE = 2


class GameNotFoundError(Exception):
    """Exception raised when no game exists for an id."""
    pass


@dataclass
class ScoreEntry:
    """A saved result on the score board."""
    gameId: str
    playerName: str
    movesCount: int
    boardSize: int
    playerWon: bool
    score: int
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GameService:
    def __init__(self, repository: Optional[InMemoryGameRepository] = None,
                 rng: Optional[random.Random] = None, config: Optional[Dict[str, Any]] = None):
        self.repository = repository or InMemoryGameRepository()
        self.rng = rng or random.Random()
        self.config = dict(DEFAULT_CONFIG)
        self.config.update(load_config() if config is None else config)
        self.saved_scores: List[ScoreEntry] = []
        self._game_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, game_id: str) -> threading.Lock:
        """Lock for a stored game. Unknown ids never get an entry."""
        with self._registry_lock:
            lock = self._game_locks.get(game_id)
            if lock is None:
                if self.repository.find_by_id(game_id) is None:
                    raise GameNotFoundError(f"Game {game_id} not found")
                lock = self._game_locks[game_id] = threading.Lock()
            return lock

    @contextmanager
    def _locked_game(self, game_id: str) -> Iterator[GameState]:
        """Yield the stored game with its lock held."""
        with self._lock_for(game_id):
            # the game may have been deleted while we waited for the lock
            yield self._load(game_id)

    def _load(self, game_id: str) -> GameState:
        game_state = self.repository.find_by_id(game_id)
        if game_state is None:
            raise GameNotFoundError(f"Game {game_id} not found")
        return game_state

    def create_game(self, board_size: Optional[int] = None,
                    difficulty: Union[int, str, None] = None) -> GameState:
        """
        Start a new game.

        Args:
            board_size: Board radius, at least 2 (default from config)
            difficulty: Level 1-10 or 'easy' / 'medium' / 'hard' (default from config)

        Returns:
            A snapshot of the new game

        Raises:
            ValueError: for a bad board size or difficulty
        """
        if board_size is None:
            board_size = self.config['default_board_size']
        if isinstance(board_size, bool) or not isinstance(board_size, int):
            raise ValueError(f"Board size must be an integer, got {board_size!r}")
        max_size = self.config['max_board_size']
        # radius 1 has no blockable cell, so the player could never move
        if not MIN_BOARD_SIZE <= board_size <= max_size:
            raise ValueError(f"Board size must be between {MIN_BOARD_SIZE} and {max_size}")
        if difficulty is None:
            difficulty = self.config['default_difficulty']
        level = resolve_difficulty(difficulty)

        game_state = new_game(str(uuid.uuid4()), board_size, level)
        self.repository.save(game_state)
        logger.info("Created game %s (size=%d, difficulty=%d)", game_state.game_id, board_size, level)
        return game_state.snapshot()

    def execute_player_move(self, game_id: str, q: int, r: int) -> GameState:
        """
        Block (q, r) for the player and let the cat reply.

        Returns:
            A snapshot of the game after the turn

        Raises:
            GameNotFoundError: unknown game id
            GameTerminalError: the game is already over
            InvalidMoveError: the cell cannot be blocked
        """
        position = HexPosition(q, r)
        with self._locked_game(game_id) as game_state:
            strategy = strategy_for_difficulty(game_state.difficulty, self.rng, self.config)
            game_state.apply_player_move(position, strategy, default_target(game_state.board))
            self.repository.save(game_state)
            result = game_state.snapshot()
        logger.debug("Game %s: blocked (%d, %d), cat at (%d, %d)", game_id, q, r,
                     result.cat_position.q, result.cat_position.r)
        return result

    def delete_game(self, game_id: str) -> None:
        """Forget a game and its lock. Raises GameNotFoundError for unknown ids."""
        with self._locked_game(game_id):
            self.repository.delete_by_id(game_id)
            with self._registry_lock:
                self._game_locks.pop(game_id, None)
        logger.info("Deleted game %s", game_id)

    def get_game_state(self, game_id: str) -> GameState:
        """Snapshot of the game between turns."""
        with self._locked_game(game_id) as game_state:
            return game_state.snapshot()

    def analyze_game(self, game_id: str) -> Dict[str, Any]:
        """Statistics plus the escape path the cat currently sees."""
        with self._locked_game(game_id) as game_state:
            analysis = game_state.get_statistics()
            if game_state.is_finished():
                escape_path = []
            else:
                escape_path = AStarStrategy.find_path(game_state.board, game_state.cat_position)
            analysis['escapePath'] = [pos.to_dict() for pos in escape_path]
            analysis['catCanEscape'] = bool(escape_path)
            analysis['blockableCells'] = len(game_state.board.get_positions_where(game_state.can_execute_move))
        return analysis

    @staticmethod
    def _first_blockable_neighbor(game_state: GameState) -> Optional[HexPosition]:
        for position in game_state.board.get_adjacent_positions(game_state.cat_position):
            if game_state.can_execute_move(position):
                return position
        return None

    def get_suggested_move(self, game_id: str) -> Optional[HexPosition]:
        """Simple hint: the first blockable cell next to the cat."""
        with self._locked_game(game_id) as game_state:
            if game_state.is_finished():
                return None
            return self._first_blockable_neighbor(game_state)

    def get_intelligent_suggestion(self, game_id: str) -> Optional[HexPosition]:
        """Hint: block the cell the hard cat would step to next."""
        with self._locked_game(game_id) as game_state:
            if game_state.is_finished():
                return None
            next_cell = AStarStrategy().select_move(game_state.board, game_state.cat_position,
                                                    default_target(game_state.board))
            if next_cell is not None and game_state.can_execute_move(next_cell):
                return next_cell
            return self._first_blockable_neighbor(game_state)

    def get_leaderboard(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Finished games by score, best first.

        Finished games never change again, so no game lock is needed here.
        """
        limit = self.config['leaderboard_limit'] if limit is None else limit
        ranked = self.repository.find_all_sorted(key=lambda game: game.calculate_score(), reverse=True)
        return [
            {
                'gameId': game.game_id,
                'score': game.calculate_score(),
                'status': game.status.value,
                'date': game.created_at,
            }
            for game in ranked if game.is_finished()
        ][:limit]

    def get_player_statistics(self) -> Dict[str, Any]:
        total = len(self.repository.find_all())
        won = self.repository.count_where(lambda game: game.status == GameStatus.PLAYER_WON)
        lost = self.repository.count_where(lambda game: game.status == GameStatus.PLAYER_LOST)
        return {
            'totalGames': total,
            'wonGames': won,
            'lostGames': lost,
            'winRate': (won / total * 100) if total else 0.0,
        }

    def save_score(self, game_id: str, player_name: str) -> ScoreEntry:
        """Record a game's result under a player name."""
        if not player_name or not player_name.strip():
            raise ValueError("Player name is required")
        with self._locked_game(game_id) as game_state:
            entry = ScoreEntry(
                gameId=game_id,
                playerName=player_name.strip(),
                movesCount=game_state.move_count,
                boardSize=game_state.board_size,
                playerWon=game_state.has_player_won(),
                score=game_state.calculate_score(),
            )
        self.saved_scores.append(entry)
        logger.info("Saved score %d for %s (game %s)", entry.score, entry.playerName, game_id)
        return entry

    def high_scores(self, limit: int = 10) -> List[ScoreEntry]:
        """Saved scores with the fewest moves first."""
        return sorted(self.saved_scores, key=lambda e: e.movesCount)[:limit]

    def winning_scores(self, limit: int = 10) -> List[ScoreEntry]:
        won = [e for e in self.saved_scores if e.playerWon]
        return sorted(won, key=lambda e: e.movesCount)[:limit]

    def recent_scores(self, limit: int = 10) -> List[ScoreEntry]:
        # entries are appended in time order, so reversing first settles equal timestamps
        return sorted(reversed(self.saved_scores), key=lambda e: e.timestamp, reverse=True)[:limit]
