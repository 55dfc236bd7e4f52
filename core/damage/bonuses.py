"""Helpers turning attacker-side records into additive bonuses."""

from __future__ import annotations

import math
from typing import Iterable

__all__ = ["rank_bonus", "combine_ignore_rates"]

RANK_POINTS_PER_PERCENT = 300
RANK_BONUS_CAP = 1.0


def rank_bonus(points: int) -> float:
    """1% damage per 300 ranking points, capped at +100%."""

    if points <= 0:
        return 0.0
    return min(math.floor(points / RANK_POINTS_PER_PERCENT) * 0.01, RANK_BONUS_CAP)


def combine_ignore_rates(rates: Iterable[float]) -> float:
    """Sum the mitigation-ignore sources of an attacker, capped at 1."""

    return min(sum(rates), 1.0)
