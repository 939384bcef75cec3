"""Tests for the in-memory game repository."""

import threading

import pytest
from models import GameStatus
from repository import InMemoryGameRepository
from tests.conftest import make_state


@pytest.fixture
def repo():
    repository = InMemoryGameRepository()
    repository.save(make_state(game_id="a", moves=2, status=GameStatus.PLAYER_WON))
    repository.save(make_state(game_id="b", moves=9, status=GameStatus.PLAYER_LOST))
    repository.save(make_state(game_id="c", moves=1))
    return repository


class TestRepository:
    def test_find_by_id(self, repo):
        assert repo.find_by_id("a").game_id == "a"
        assert repo.find_by_id("missing") is None
        assert repo.find_by_id(None) is None

    def test_save_is_upsert(self, repo):
        replacement = make_state(game_id="a", moves=4)
        repo.save(replacement)
        assert len(repo) == 3
        assert repo.find_by_id("a") is replacement

    def test_save_none(self, repo):
        with pytest.raises(ValueError):
            repo.save(None)

    def test_find_where(self, repo):
        finished = repo.find_where(lambda game: game.is_finished())
        assert sorted(game.game_id for game in finished) == ["a", "b"]

    def test_count_where(self, repo):
        assert repo.count_where(lambda game: game.has_player_won()) == 1

    def test_find_all_sorted(self, repo):
        by_moves = repo.find_all_sorted(key=lambda game: game.move_count)
        assert [game.game_id for game in by_moves] == ["c", "a", "b"]
        by_score = repo.find_all_sorted(key=lambda game: game.calculate_score(), reverse=True)
        assert by_score[0].game_id == "a"

    def test_delete(self, repo):
        assert repo.delete_by_id("b") is True
        assert repo.delete_by_id("b") is False
        assert repo.find_by_id("b") is None

    def test_concurrent_saves(self):
        repository = InMemoryGameRepository()

        def worker(start):
            for i in range(start, start + 50):
                repository.save(make_state(game_id=f"g{i}"))

        threads = [threading.Thread(target=worker, args=(n * 50,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(repository) == 200
