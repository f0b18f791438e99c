"""
Topple - Dice

Die rolls come from the `secrets` module so every face is equally likely
and unpredictable. The roller is injectable: the reducer accepts any
zero-argument callable, which lets tests script exact sequences.
"""

import secrets
from typing import Callable, Iterable

DIE_FACES = 6

DiceRoller = Callable[[], int]


def roll_die() -> int:
    """Roll a single D6 (1-6, uniform)."""
    return secrets.randbelow(DIE_FACES) + 1


def scripted_roller(values: Iterable[int]) -> DiceRoller:
    """
    Build a roller that returns the given values in order.

    Raises:
        RuntimeError: When called after the values are used up
    """
    remaining = iter(values)

    def roll() -> int:
        try:
            return next(remaining)
        except StopIteration:
            raise RuntimeError("Scripted roller has no values left") from None

    return roll
