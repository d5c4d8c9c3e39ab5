from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from maze_carver.core.grid import Coord, Grid


class MazeAnalyzer:
    @staticmethod
    def open_wall_count(grid: Grid) -> int:
        return grid.open_wall_count()

    @staticmethod
    def reachable_cells(grid: Grid, start: Coord = (0, 0)) -> Set[Coord]:
        """Flood fill over open walls. Iterative so large grids don't hit the recursion limit."""
        grid.get_index(*start)
        seen = {start}
        stack = [start]
        while stack:
            x, y = stack.pop()
            for n in grid.get_open_neighbors(x, y):
                if n not in seen:
                    seen.add(n)
                    stack.append(n)
        return seen

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        """
        Connected and acyclic: every cell reachable from (0, 0)
        and exactly one open wall fewer than there are cells.
        """
        total = grid.width * grid.height
        if grid.open_wall_count() != total - 1:
            return False
        return len(MazeAnalyzer.reachable_cells(grid)) == total

    @staticmethod
    def solve(grid: Grid, start: Coord, end: Coord) -> List[Coord]:
        """
        BFS over open walls. Returns the path from start to end inclusive,
        or an empty list when end cannot be reached.
        """
        grid.get_index(*start)
        grid.get_index(*end)

        parents: Dict[Coord, Optional[Coord]] = {start: None}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            if current == end:
                break
            for n in grid.get_open_neighbors(*current):
                if n not in parents:
                    parents[n] = current
                    queue.append(n)

        if end not in parents:
            return []

        path = []
        curr: Optional[Coord] = end
        while curr is not None:
            path.append(curr)
            curr = parents[curr]
        path.reverse()
        return path

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        dead_ends = 0
        corridors = 0
        junctions = 0

        for cell in grid:
            exits = sum(1 for _ in grid.get_open_neighbors(cell.x, cell.y))
            if exits == 1:
                dead_ends += 1
            elif exits == 2:
                corridors += 1
            elif exits >= 3:
                junctions += 1

        total = grid.width * grid.height
        return {
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "dead_end_percent": (dead_ends / total) * 100,
        }

    @staticmethod
    def wall_orientations(grid: Grid) -> Tuple[int, int]:
        """(open SOUTH walls, open EAST walls)"""
        south = east = 0
        for wall in grid.open_walls():
            if wall.direction == Grid.SOUTH:
                south += 1
            else:
                east += 1
        return south, east
