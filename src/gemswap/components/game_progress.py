from dataclasses import dataclass


@dataclass(slots=True)
class GameProgress:
    """Cumulative score and the combo counter of the cascade in flight."""
    score: int = 0
    combo_count: int = 0
    # Highest combo seen this session; handy for summaries.
    best_combo: int = 0
