"""
Utility functions for ELO rating calculations.

This module provides pure mathematical functions for calculating and updating ELO ratings.
These functions are separated from database operations for easier testing and reuse.
"""

import math
from enum import Enum
from typing import Tuple

DEFAULT_K_FACTOR = 32


class Outcome(Enum):
    """Possible outcomes of a comparison."""

    WIN = 1.0
    LOSS = 0.0


def expected_score(rating_a: float, rating_b: float) -> float:
    """
    Calculate expected score (winning probability) for player A when facing player B.

    Args:
        rating_a: ELO rating of player A
        rating_b: ELO rating of player B

    Returns:
        Expected probability of player A winning against player B
    """
    return 1.0 / (1.0 + math.pow(10, (rating_b - rating_a) / 400.0))


def calculate_new_rating(
    rating: float, expected: float, actual: float, k_factor: float
) -> float:
    """
    Calculate new ELO rating based on expected and actual outcome.

    Args:
        rating: Current ELO rating
        expected: Expected score (probability of winning)
        actual: Actual outcome (1.0 for win, 0.0 for loss)
        k_factor: K-factor determining the maximum possible adjustment

    Returns:
        New ELO rating, unrounded
    """
    return rating + k_factor * (actual - expected)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, with .5 going away from zero (not to even)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def rate(
    winner_rating: int, loser_rating: int, k_factor: int = DEFAULT_K_FACTOR
) -> Tuple[int, int]:
    """
    Calculate the new integer ratings of both sides of a decided match.

    Each side is rounded on its own, so the winner's gain and the loser's loss
    do not have to cancel out.

    Args:
        winner_rating: Current rating of the winner
        loser_rating: Current rating of the loser
        k_factor: K-factor for this match

    Returns:
        Tuple of (new_winner_rating, new_loser_rating)
    """
    expected_winner = expected_score(winner_rating, loser_rating)
    expected_loser = expected_score(loser_rating, winner_rating)

    new_winner = calculate_new_rating(
        winner_rating, expected_winner, Outcome.WIN.value, k_factor
    )
    new_loser = calculate_new_rating(
        loser_rating, expected_loser, Outcome.LOSS.value, k_factor
    )

    return round_half_away_from_zero(new_winner), round_half_away_from_zero(new_loser)
