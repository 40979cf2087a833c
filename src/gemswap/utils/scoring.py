from __future__ import annotations

from typing import Iterable, Sized

from gemswap.constants import BASE_POINTS_PER_TOKEN, LENGTH_BONUS_PER_TOKEN, MIN_MATCH_LENGTH


def score_run(
    length: int,
    *,
    base_points: int = BASE_POINTS_PER_TOKEN,
    length_bonus: int = LENGTH_BONUS_PER_TOKEN,
) -> int:
    """Points for one run of ``length`` cleared tokens, before the combo multiplier."""
    return base_points * length + length_bonus * max(0, length - MIN_MATCH_LENGTH)


def score_round(
    runs: Iterable[Sized],
    combo: int,
    *,
    base_points: int = BASE_POINTS_PER_TOKEN,
    length_bonus: int = LENGTH_BONUS_PER_TOKEN,
) -> int:
    """Sum the runs of one matching round and multiply by the current combo count.

    Runs are measured by their reported positions, so a vertical run that shares a
    cell with a horizontal one is scored without that cell.
    """
    total = sum(
        score_run(len(run), base_points=base_points, length_bonus=length_bonus)
        for run in runs
    )
    return total * max(combo, 0)
