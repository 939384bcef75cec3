"""Shared test fixtures and helpers."""

import random

import pytest

from board import HexBoard
from models import GameStatus, HexPosition
from service import GameService
from state import GameState, new_game
from strategies import MovementStrategy


class StationaryStrategy(MovementStrategy):
    """Cat that never moves; lets tests drive the board by hand."""
    name = "stationary"

    def select_move(self, board, current, target=None):
        return None


# --- Fixtures ---


@pytest.fixture
def game():
    """Fresh radius-5 game at medium difficulty."""
    return new_game("test", board_size=5, difficulty=5)


@pytest.fixture
def small_game():
    """Fresh radius-2 game."""
    return new_game("small", board_size=2, difficulty=5)


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def game_service(rng):
    """Service with its own repository and a seeded RNG."""
    return GameService(rng=rng)


@pytest.fixture
def api_client(monkeypatch):
    """Flask test client backed by a fresh service."""
    import app as app_module

    monkeypatch.setattr(app_module, "service", GameService(rng=random.Random(42)))
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as client:
        yield client


# --- Helper functions ---


def ring(board, radius, center=HexPosition(0, 0)):
    """All in-bounds cells at an exact distance from center."""
    return [pos for pos in board.all_positions() if pos.distance_to(center) == radius]


def make_board(size, blocked=()):
    return HexBoard(size, [HexPosition(q, r) for q, r in blocked])


def make_state(size=5, blocked=(), cat=(0, 0), moves=0, status=GameStatus.IN_PROGRESS,
               difficulty=5, game_id="test"):
    """Build a game state directly, bypassing move validation."""
    return GameState(
        game_id=game_id,
        board=make_board(size, blocked),
        cat_position=HexPosition(*cat),
        move_count=moves,
        status=status,
        difficulty=difficulty,
    )


def create_api_game(client, board_size=5, difficulty=5):
    """Create a new game via API, return game_id."""
    resp = client.post("/api/game/new", json={"boardSize": board_size, "difficulty": difficulty})
    assert resp.status_code == 200
    return resp.json["gameId"]
