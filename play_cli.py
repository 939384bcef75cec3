"""
CLI play mode for Trap the Cat.

Block one cell per turn and keep the cat (C) from reaching the rim (o).
Plays against a local engine, or against a running server with --server.

Usage: python play_cli.py [--size 5] [--difficulty hard] [--server URL]
"""

import argparse
import logging
from typing import Any, Dict, Optional, Set, Tuple

from board import InvalidMoveError
from client import GameClient, GameClientError
from service import GameService
from state import GameTerminalError


# ---------------------------------------------------------------------------
# Backends: both return plain dicts shaped like GameState.to_dict()
# ---------------------------------------------------------------------------


class LocalBackend:
    def __init__(self):
        self.service = GameService()

    def create_game(self, board_size: Optional[int], difficulty: Optional[str]) -> Dict[str, Any]:
        return self.service.create_game(board_size, difficulty).to_dict()

    def block(self, game_id: str, q: int, r: int) -> Dict[str, Any]:
        game_state = self.service.execute_player_move(game_id, q, r)
        data = game_state.to_dict()
        data['score'] = game_state.calculate_score()
        return data

    def suggestion(self, game_id: str) -> Optional[Dict[str, int]]:
        hint = self.service.get_intelligent_suggestion(game_id)
        return hint.to_dict() if hint else None


class RemoteBackend:
    def __init__(self, base_url: str):
        self.client = GameClient(base_url)

    def create_game(self, board_size: Optional[int], difficulty: Optional[str]) -> Dict[str, Any]:
        return self.client.create_game(board_size, difficulty)

    def block(self, game_id: str, q: int, r: int) -> Dict[str, Any]:
        return self.client.block(game_id, q, r)

    def suggestion(self, game_id: str) -> Optional[Dict[str, int]]:
        return self.client.get_suggestion(game_id)


# ---------------------------------------------------------------------------
# ASCII Hex Renderer
# ---------------------------------------------------------------------------


def render_board(game: Dict[str, Any]) -> str:
    """Draw the hexagon row by row, indenting rows to stagger the cells."""
    n = game['boardSize']
    cat = (game['catPosition']['q'], game['catPosition']['r'])
    blocked: Set[Tuple[int, int]] = {(c['q'], c['r']) for c in game['blockedCells']}

    lines = []
    for r in range(-n, n + 1):
        cells = []
        for q in range(max(-n, -n - r), min(n, n - r) + 1):
            if (q, r) == cat:
                cells.append('C')
            elif (q, r) in blocked:
                cells.append('#')
            elif abs(q) == n or abs(r) == n or abs(q + r) == n:
                cells.append('o')
            else:
                cells.append('.')
        lines.append(f"r={r:+d} " + ' ' * abs(r) + ' '.join(cells))
    return '\n'.join(lines)


def parse_move(raw: str) -> Tuple[int, int]:
    """Parse 'q r' or 'q,r' into integers."""
    parts = raw.replace(',', ' ').split()
    if len(parts) != 2:
        raise ValueError("Enter a move as: q r")
    return int(parts[0]), int(parts[1])


# ---------------------------------------------------------------------------
# Game loop
# ---------------------------------------------------------------------------


def play(backend, board_size: Optional[int], difficulty: Optional[str]) -> Dict[str, Any]:
    game = backend.create_game(board_size, difficulty)
    game_id = game['gameId']
    print(f"\n=== TRAP THE CAT (size {game['boardSize']}, difficulty {game['difficulty']}) ===")
    print("Commands: 'q r' to block a cell, 'hint', 'quit'")

    while game['status'] == 'IN_PROGRESS':
        print()
        print(render_board(game))
        raw = input("> ").strip().lower()
        if raw in ('quit', 'exit'):
            print("Bye.")
            return game
        if raw == 'hint':
            hint = backend.suggestion(game_id)
            print(f"Try blocking ({hint['q']}, {hint['r']})" if hint else "No hint available")
            continue
        try:
            q, r = parse_move(raw)
            game = backend.block(game_id, q, r)
        except ValueError as e:
            print(f"  {e}")
        except (InvalidMoveError, GameTerminalError) as e:
            print(f"  Invalid move: {e}")
        except GameClientError as e:
            print(f"  Server rejected move: {e.message}")

    print()
    print(render_board(game))
    if game['status'] == 'PLAYER_WON':
        print(f"\nYou trapped the cat in {game['moveCount']} moves! Score: {game.get('score')}")
    else:
        print(f"\nThe cat escaped after {game['moveCount']} moves. Score: {game.get('score')}")
    return game


def main():
    parser = argparse.ArgumentParser(description="Play Trap the Cat in the terminal")
    parser.add_argument('--size', type=int, default=None, help="board radius")
    parser.add_argument('--difficulty', default=None, help="1-10 or easy/medium/hard")
    parser.add_argument('--server', default=None, help="API base URL, e.g. http://127.0.0.1:5000/api")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    backend = RemoteBackend(args.server) if args.server else LocalBackend()
    play(backend, args.size, args.difficulty)


if __name__ == "__main__":
    main()
