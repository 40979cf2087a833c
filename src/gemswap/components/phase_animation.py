from dataclasses import dataclass


@dataclass(slots=True)
class PhaseAnimation:
    """Timer for one announced phase animation (swap, fade, fall or refill)."""
    kind: str
    duration: float
    elapsed: float = 0.0

    @property
    def finished(self) -> bool:
        return self.elapsed >= self.duration
