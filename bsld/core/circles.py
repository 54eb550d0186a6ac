"""
Boskeopolis Land Data - Level Numbering

Levels are numbered across both games: each game has 5 circles of 16
levels, so game 1 circle 0 level 0 is level 80.
"""

from .constants import LEVELS_PER_CIRCLE, LEVELS_PER_GAME


def get_nth_level_of_circle(game: int, circle: int, level: int) -> int:
    """
    Get the save file level index of a level within a circle.

    Example:
        >>> get_nth_level_of_circle(1, 1, 5)
        101
    """
    return game * LEVELS_PER_GAME + circle * LEVELS_PER_CIRCLE + level


def get_first_level_of_circle(game: int, circle: int) -> int:
    return get_nth_level_of_circle(game, circle, 0)


def get_last_level_of_circle(game: int, circle: int) -> int:
    return get_nth_level_of_circle(game, circle, LEVELS_PER_CIRCLE - 1)
