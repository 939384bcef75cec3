import logging
from flask import Flask, request, jsonify
from flask_cors import CORS
from board import InvalidMoveError
from service import GameService, GameNotFoundError
from state import GameState, GameTerminalError
from typing import Any, Dict

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
service = GameService()  # In-memory games and score board

logger = logging.getLogger(__name__)


def serialize_game(game_state: GameState) -> Dict[str, Any]:
    """Game snapshot plus fields the client needs for display."""
    data = game_state.to_dict()
    data['finished'] = game_state.is_finished()
    if game_state.is_finished():
        data['score'] = game_state.calculate_score()
    return data


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f'{name} must be an integer')
    try:
        return int(value)
    except (ValueError, TypeError):
        raise ValueError(f'{name} must be an integer')


def _limit_arg() -> int:
    return _parse_int(request.args.get('limit', service.config['leaderboard_limit']), 'limit')


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Create a new game with the requested board size and difficulty."""
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid JSON data'}), 400

        board_size = data.get('boardSize')
        difficulty = data.get('difficulty')
        try:
            if board_size is not None:
                board_size = _parse_int(board_size, 'boardSize')
            game_state = service.create_game(board_size, difficulty)
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        return jsonify(serialize_game(game_state))

    except Exception as e:
        logger.exception("Failed to create game")
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current game state for the given game ID."""
    try:
        return jsonify(serialize_game(service.get_game_state(game_id)))
    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game state: {str(e)}'}), 500


@app.route('/api/game/<game_id>', methods=['DELETE'])
def delete_game(game_id: str):
    """Discard a game; saved scores are kept."""
    try:
        service.delete_game(game_id)
        return jsonify({'gameId': game_id, 'deleted': True})
    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except Exception as e:
        logger.exception("Failed to delete game %s", game_id)
        return jsonify({'error': f'Failed to delete game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/block', methods=['POST'])
def block_cell(game_id: str):
    """Block a cell for the player; the cat replies in the same request."""
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid JSON data'}), 400
        if 'q' not in data or 'r' not in data:
            return jsonify({'error': 'Request must have q and r coordinates'}), 400
        try:
            q = _parse_int(data['q'], 'q')
            r = _parse_int(data['r'], 'r')
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        game_state = service.execute_player_move(game_id, q, r)
        return jsonify(serialize_game(game_state))

    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except GameTerminalError as e:
        return jsonify({'error': str(e)}), 409
    except InvalidMoveError as e:
        return jsonify({'error': f'Invalid move: {str(e)}'}), 400
    except Exception as e:
        logger.exception("Failed to process move for game %s", game_id)
        return jsonify({'error': f'Failed to process move: {str(e)}'}), 500


@app.route('/api/game/<game_id>/statistics', methods=['GET'])
def get_game_statistics(game_id: str):
    try:
        return jsonify(service.analyze_game(game_id))
    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except Exception as e:
        return jsonify({'error': f'Failed to retrieve statistics: {str(e)}'}), 500


@app.route('/api/game/<game_id>/suggestion', methods=['GET'])
def get_suggestion(game_id: str):
    """Suggest a cell to block next."""
    try:
        suggestion = service.get_intelligent_suggestion(game_id)
        if suggestion is None:
            return jsonify({'suggestion': None, 'message': 'No suggestions available'})
        return jsonify({
            'suggestion': suggestion.to_dict(),
            'message': 'Block the cell the cat wants to move to'
        })
    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except Exception as e:
        return jsonify({'error': f'Failed to compute suggestion: {str(e)}'}), 500


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full game log for analysis."""
    try:
        game_state = service.get_game_state(game_id)
        return jsonify({
            'gameId': game_id,
            'status': game_state.status.value,
            'moveCount': game_state.move_count,
            'log': game_state.log
        })
    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game log: {str(e)}'}), 500


@app.route('/api/game/<game_id>/score', methods=['POST'])
def save_score(game_id: str):
    """Save the game's result on the score board."""
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid JSON data'}), 400
        player_name = data.get('playerName')
        if not isinstance(player_name, str):
            return jsonify({'error': 'playerName must be a string'}), 400
        try:
            entry = service.save_score(game_id, player_name)
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        return jsonify(entry.to_dict())
    except GameNotFoundError:
        return jsonify({'error': 'Game not found'}), 404
    except Exception as e:
        return jsonify({'error': f'Failed to save score: {str(e)}'}), 500


@app.route('/api/scores/<kind>', methods=['GET'])
def list_scores(kind: str):
    """Saved scores: 'high' (fewest moves), 'winning' (wins only) or 'recent'."""
    listings = {
        'high': service.high_scores,
        'winning': service.winning_scores,
        'recent': service.recent_scores,
    }
    if kind not in listings:
        return jsonify({'error': f'Unknown score listing: {kind}'}), 404
    try:
        limit = _limit_arg()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify([entry.to_dict() for entry in listings[kind](limit)])


@app.route('/api/leaderboard', methods=['GET'])
def leaderboard():
    try:
        limit = _limit_arg()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify(service.get_leaderboard(limit))


@app.route('/api/stats', methods=['GET'])
def player_statistics():
    return jsonify(service.get_player_statistics())


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
