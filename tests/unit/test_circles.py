"""Unit tests for level numbering helpers."""

import pytest

from bsld.core.circles import (
    get_first_level_of_circle,
    get_last_level_of_circle,
    get_nth_level_of_circle,
)


class TestCircles:
    """Test circle-to-level index arithmetic."""

    @pytest.mark.parametrize(
        "game,circle,expected",
        [(0, 0, 0), (0, 1, 16), (0, 4, 64), (1, 0, 80), (1, 2, 112), (1, 4, 144)],
    )
    def test_first_level(self, game, circle, expected):
        assert get_first_level_of_circle(game, circle) == expected

    @pytest.mark.parametrize(
        "game,circle,expected",
        [(0, 0, 15), (0, 3, 63), (0, 4, 79), (1, 0, 95), (1, 3, 143), (1, 4, 159)],
    )
    def test_last_level(self, game, circle, expected):
        assert get_last_level_of_circle(game, circle) == expected

    def test_nth_level(self):
        assert get_nth_level_of_circle(0, 0, 0) == 0
        assert get_nth_level_of_circle(1, 1, 5) == 101
