"""Tests for hex coordinates and game status."""

import pytest
from models import HEX_DIRECTIONS, GameStatus, HexPosition, hex_distance


class TestHexPosition:
    def test_s_is_derived(self):
        pos = HexPosition(2, -5)
        assert pos.s == 3
        assert pos.q + pos.r + pos.s == 0

    @pytest.mark.parametrize("q,r", [(0, 0), (3, -1), (-4, 4), (7, 2), (-2, -2)])
    def test_cube_invariant(self, q, r):
        pos = HexPosition(q, r)
        assert pos.q + pos.r + pos.s == 0

    def test_equality_by_q_and_r(self):
        assert HexPosition(1, 2) == HexPosition(1, 2)
        assert HexPosition(1, 2) != HexPosition(2, 1)

    def test_hashable(self):
        cells = {HexPosition(1, 0), HexPosition(1, 0), HexPosition(0, 1)}
        assert len(cells) == 2

    def test_immutable(self):
        pos = HexPosition(1, 1)
        with pytest.raises(AttributeError):
            pos.q = 5

    def test_distance(self):
        assert HexPosition(0, 0).distance_to(HexPosition(0, 0)) == 0
        assert HexPosition(0, 0).distance_to(HexPosition(1, 0)) == 1
        assert HexPosition(0, 0).distance_to(HexPosition(2, -1)) == 2
        # (0,0) -> (2,2): |dq|=2, |dr|=2, |ds|=4
        assert HexPosition(0, 0).distance_to(HexPosition(2, 2)) == 4
        assert hex_distance(HexPosition(-3, 1), HexPosition(2, -2)) == 5

    def test_distance_is_symmetric(self):
        a, b = HexPosition(3, -4), HexPosition(-2, 1)
        assert a.distance_to(b) == b.distance_to(a)

    def test_neighbors_order(self):
        neighbors = HexPosition(2, 3).neighbors()
        assert neighbors == [HexPosition(2 + dq, 3 + dr) for dq, dr in HEX_DIRECTIONS]
        assert all(HexPosition(2, 3).distance_to(n) == 1 for n in neighbors)

    def test_direction_order(self):
        assert HEX_DIRECTIONS == [(1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1)]

    def test_dict_conversion(self):
        pos = HexPosition(-2, 4)
        assert pos.to_dict() == {'q': -2, 'r': 4}
        assert HexPosition.from_dict({'q': -2, 'r': 4}) == pos


class TestGameStatus:
    def test_values(self):
        assert GameStatus.IN_PROGRESS.value == "IN_PROGRESS"
        assert GameStatus.PLAYER_WON.value == "PLAYER_WON"
        assert GameStatus.PLAYER_LOST.value == "PLAYER_LOST"

    def test_lookup_by_value(self):
        assert GameStatus("PLAYER_LOST") is GameStatus.PLAYER_LOST
