import logging
from typing import Iterator, List

from maze_carver.algo.base import Generator
from maze_carver.core.errors import MazeError
from maze_carver.core.grid import Cell

logger = logging.getLogger(__name__)


class RecursiveBacktracker(Generator):
    """
    Randomized depth-first carving with an explicit stack.

    Every cell is pushed once when first visited and popped once when it has
    no unvisited neighbors left, so a w*h grid takes 2*w*h stack operations
    and opens w*h - 1 walls.
    """
    def __init__(self, grid, seed=None, rng=None):
        super().__init__(grid, seed=seed, rng=rng)
        self.push_count = 0
        self.pop_count = 0

    def run(self) -> Iterator[str]:
        grid = self.grid
        rng = self.rng

        if grid.visited_count() or grid.open_wall_count():
            raise MazeError(f"{grid} has already been carved")

        # Random start, x then y
        start = grid.cell(rng.randrange(grid.width), rng.randrange(grid.height))
        grid.set_visited(start.x, start.y)
        logger.debug("Carving %s from start %s", grid, start.coord)

        stack: List[Cell] = [start]
        self.push_count += 1

        while stack:
            current = stack[-1]
            unvisited = current.unvisited_neighbors()

            if unvisited:
                nxt = rng.choice(unvisited)
                grid.set_visited(nxt.x, nxt.y)
                grid.open_wall(current, nxt)

                stack.append(nxt)
                self.push_count += 1
                self.step_count += 1

                # Yield every N steps to keep callers responsive without spamming
                if self.step_count % 100 == 0:
                    yield f"Carving... Stack: {len(stack)}"
            else:
                # Backtrack
                stack.pop()
                self.pop_count += 1
                if self.pop_count % 100 == 0:
                    yield f"Backtracking... Stack: {len(stack)}"

        logger.debug("Carved %d passages in %d stack operations",
                     self.step_count, self.push_count + self.pop_count)
        yield "Done"
