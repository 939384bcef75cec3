"""
In-memory storage for game states.

Safe to share between request threads; every operation takes the same lock.
Nothing survives a process restart.
"""

import threading
from typing import Any, Callable, Dict, List, Optional
from state import GameState


class InMemoryGameRepository:
    def __init__(self):
        self._games: Dict[str, GameState] = {}
        self._lock = threading.RLock()

    def save(self, game_state: GameState) -> GameState:
        """Insert or replace a game keyed by its id."""
        if game_state is None:
            raise ValueError("Game state cannot be None")
        with self._lock:
            self._games[game_state.game_id] = game_state
        return game_state

    def find_by_id(self, game_id: str) -> Optional[GameState]:
        if game_id is None:
            return None
        with self._lock:
            return self._games.get(game_id)

    def find_all(self) -> List[GameState]:
        with self._lock:
            return list(self._games.values())

    def find_where(self, condition: Callable[[GameState], bool]) -> List[GameState]:
        return [game for game in self.find_all() if condition(game)]

    def find_all_sorted(self, key: Callable[[GameState], Any], reverse: bool = False) -> List[GameState]:
        return sorted(self.find_all(), key=key, reverse=reverse)

    def count_where(self, condition: Callable[[GameState], bool]) -> int:
        return len(self.find_where(condition))

    def delete_by_id(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
