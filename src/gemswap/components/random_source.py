import random
from dataclasses import dataclass, field


@dataclass(slots=True)
class RandomSource:
    """Seedable generator shared by the systems of one session."""
    rng: random.Random = field(default_factory=random.Random)
