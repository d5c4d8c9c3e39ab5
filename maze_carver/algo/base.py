import random
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from maze_carver.core.grid import Grid


class Generator(ABC):
    def __init__(self, grid: Grid, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.grid = grid
        # seed=None seeds from system entropy
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields status strings or progress updates.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self) -> Grid:
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
        return self.grid
