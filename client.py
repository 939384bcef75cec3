"""
HTTP client for a running hex pursuit server.
"""

import requests
from typing import Any, Dict, List, Optional, Union


class GameClientError(Exception):
    """Raised when the server answers with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class GameClient:
    """Thin wrapper over the JSON API."""

    def __init__(self, base_url: str = 'http://127.0.0.1:5000/api', timeout: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if response.status_code >= 400:
            try:
                message = response.json().get('error', response.text)
            except ValueError:
                message = response.text
            raise GameClientError(response.status_code, message)
        return response.json()

    def create_game(self, board_size: Optional[int] = None,
                    difficulty: Union[int, str, None] = None) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if board_size is not None:
            data['boardSize'] = board_size
        if difficulty is not None:
            data['difficulty'] = difficulty
        return self._request('POST', '/game/new', json=data)

    def get_state(self, game_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/game/{game_id}/state')

    def delete_game(self, game_id: str) -> Dict[str, Any]:
        return self._request('DELETE', f'/game/{game_id}')

    def block(self, game_id: str, q: int, r: int) -> Dict[str, Any]:
        return self._request('POST', f'/game/{game_id}/block', json={'q': q, 'r': r})

    def get_statistics(self, game_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/game/{game_id}/statistics')

    def get_suggestion(self, game_id: str) -> Optional[Dict[str, int]]:
        return self._request('GET', f'/game/{game_id}/suggestion').get('suggestion')

    def get_log(self, game_id: str) -> List[Dict[str, Any]]:
        return self._request('GET', f'/game/{game_id}/log')['log']

    def save_score(self, game_id: str, player_name: str) -> Dict[str, Any]:
        return self._request('POST', f'/game/{game_id}/score', json={'playerName': player_name})

    def scores(self, kind: str = 'high', limit: int = 10) -> List[Dict[str, Any]]:
        return self._request('GET', f'/scores/{kind}', params={'limit': limit})

    def leaderboard(self, limit: int = 10) -> List[Dict[str, Any]]:
        return self._request('GET', '/leaderboard', params={'limit': limit})
