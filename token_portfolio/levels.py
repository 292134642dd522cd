"""Portfolio level engine — maps total USD value to a level and progress.

Levels follow a geometric progression: level 1 starts at $100 and every
further level needs 1.5x the previous threshold. All functions are pure.
"""
from __future__ import annotations

import math

from .models import LevelInfo

BASE_THRESHOLD = 100.0
LEVEL_MULTIPLIER = 1.5


def _check_value(total_value: float) -> None:
    if math.isnan(total_value) or math.isinf(total_value) or total_value < 0:
        raise ValueError(
            f"Total value must be a non-negative finite number, got {total_value!r}"
        )


def _check_level(level: int) -> None:
    if level < 0:
        raise ValueError(f"Level must be non-negative, got {level}")


def calculate_level(total_value: float) -> int:
    """Return the level reached by ``total_value`` (0 below $100)."""
    _check_value(total_value)
    if total_value < BASE_THRESHOLD:
        return 0

    level = 0
    threshold = BASE_THRESHOLD
    while total_value >= threshold:
        level += 1
        threshold *= LEVEL_MULTIPLIER
    return level


def threshold_for(level: int) -> float:
    """Return the USD value at which ``level`` starts."""
    _check_level(level)
    if level == 0:
        return 0.0
    if level == 1:
        return BASE_THRESHOLD
    return BASE_THRESHOLD * LEVEL_MULTIPLIER ** (level - 1)


def next_threshold_for(level: int) -> float:
    return threshold_for(level + 1)


def calculate_progress(total_value: float, level: int) -> float:
    """Return progress (0-100) from the current level towards the next."""
    _check_value(total_value)
    current = threshold_for(level)
    nxt = next_threshold_for(level)

    if nxt == current:
        return 0.0
    if total_value < current:
        return 0.0

    progress = ((total_value - current) / (nxt - current)) * 100
    return min(max(progress, 0.0), 100.0)


def level_info(total_value: float) -> LevelInfo:
    """Compose level, thresholds and progress for ``total_value``."""
    level = calculate_level(total_value)
    return LevelInfo(
        level=level,
        current_threshold=threshold_for(level),
        next_threshold=next_threshold_for(level),
        progress_pct=calculate_progress(total_value, level),
        total_value=total_value,
    )
