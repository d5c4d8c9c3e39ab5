from typing import Dict, Iterator, List, Tuple, Union

from maze_carver.core.errors import (
    InvalidDimensionsError,
    NoSuchAdjacencyError,
    WallAlreadyOpenError,
)

Coord = Tuple[int, int]
EdgeKey = Tuple[Coord, Coord]


class Wall:
    """
    Boundary between two adjacent cells.
    `key` is the ordered coordinate pair of the cells it separates,
    `direction` points from key[0] to key[1] (always SOUTH or EAST).
    """
    __slots__ = ('key', 'direction', 'is_open')

    def __init__(self, key: EdgeKey, direction: int):
        self.key = key
        self.direction = direction
        self.is_open = False

    @property
    def is_wall(self) -> bool:
        return not self.is_open

    def open(self):
        if self.is_open:
            raise WallAlreadyOpenError(f"Wall {self.key} is already open")
        self.is_open = True

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"Wall({self.key[0]}->{self.key[1]}, {state})"


class Cell:
    __slots__ = ('x', 'y', 'visited', 'neighbors', 'walls')

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y
        self.visited = False
        # Filled in by Grid during construction only
        self.neighbors: List['Cell'] = []
        # neighbor coordinate -> key into Grid.walls
        self.walls: Dict[Coord, EdgeKey] = {}

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    def mark_visited(self):
        self.visited = True

    def wall_key(self, other: Union['Cell', Coord]) -> EdgeKey:
        coord = other.coord if isinstance(other, Cell) else tuple(other)
        try:
            return self.walls[coord]
        except KeyError:
            raise NoSuchAdjacencyError(self.coord, coord) from None

    def unvisited_neighbors(self) -> List['Cell']:
        return [c for c in self.neighbors if not c.visited]

    def __repr__(self):
        return f"Cell({self.x}, {self.y}{', visited' if self.visited else ''})"


class Grid:
    # Direction bits
    NORTH = 0b0001
    EAST  = 0b0010
    SOUTH = 0b0100
    WEST  = 0b1000

    DX = {NORTH: 0, SOUTH: 0, EAST: 1, WEST: -1}
    DY = {NORTH: -1, SOUTH: 1, EAST: 0, WEST: 0}

    __slots__ = ('width', 'height', 'cells', 'walls', 'event_writer')

    def __init__(self, width: int, height: int, event_writer=None):
        self.validate_dimensions(width, height)
        self.width = width
        self.height = height
        self.event_writer = event_writer

        # Row-major: index = y * width + x
        self.cells: List[Cell] = [Cell(x, y) for y in range(height) for x in range(width)]
        # Wall arena, one record per adjacency
        self.walls: Dict[EdgeKey, Wall] = {}

        # Only link south and east so each adjacency gets a single wall
        for y in range(height):
            for x in range(width):
                cell = self.cells[y * width + x]
                if y < height - 1:
                    self._link(cell, self.cells[(y + 1) * width + x], self.SOUTH)
                if x < width - 1:
                    self._link(cell, self.cells[y * width + x + 1], self.EAST)

        if self.event_writer:
            self.event_writer.write_header(width, height)

    @staticmethod
    def validate_dimensions(width, height):
        for value in (width, height):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidDimensionsError(width, height)

    def _link(self, a: Cell, b: Cell, direction: int):
        key = (a.coord, b.coord)
        self.walls[key] = Wall(key, direction)

        a.walls[b.coord] = key
        b.walls[a.coord] = key
        a.neighbors.append(b)
        b.neighbors.append(a)

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def cell(self, x: int, y: int) -> Cell:
        return self.cells[self.get_index(x, y)]

    def _resolve(self, c: Union[Cell, Coord]) -> Cell:
        if isinstance(c, Cell):
            return c
        return self.cell(*c)

    def wall_between(self, a: Union[Cell, Coord], b: Union[Cell, Coord]) -> Wall:
        """
        Returns the single Wall shared by a and b.
        Raises NoSuchAdjacencyError if they are not neighbors.
        """
        cell_a = self._resolve(a)
        return self.walls[cell_a.wall_key(self._resolve(b))]

    def is_open(self, a: Union[Cell, Coord], b: Union[Cell, Coord]) -> bool:
        return self.wall_between(a, b).is_open

    def open_wall(self, a: Union[Cell, Coord], b: Union[Cell, Coord]) -> Wall:
        wall = self.wall_between(a, b)
        wall.open()

        if self.event_writer:
            (x, y), _ = wall.key
            self.event_writer.log_carve(x, y, wall.direction)
        return wall

    def has_wall(self, x: int, y: int, dir_bit: int) -> bool:
        """Closed-wall test by direction. The outer border always counts as a wall."""
        nx, ny = x + self.DX[dir_bit], y + self.DY[dir_bit]
        if not (0 <= nx < self.width and 0 <= ny < self.height):
            return True
        return not self.is_open((x, y), (nx, ny))

    def set_visited(self, x: int, y: int):
        self.cell(x, y).mark_visited()
        if self.event_writer:
            self.event_writer.log_visit(x, y)

    def is_visited(self, x: int, y: int) -> bool:
        return self.cell(x, y).visited

    def visited_count(self) -> int:
        return sum(1 for c in self.cells if c.visited)

    def get_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int, int]]:
        """
        Yields (nx, ny, direction_to_neighbor) for all grid neighbors.
        Does NOT check walls.
        """
        for n in self.cell(x, y).neighbors:
            dx, dy = n.x - x, n.y - y
            if dy < 0:
                yield (n.x, n.y, self.NORTH)
            elif dy > 0:
                yield (n.x, n.y, self.SOUTH)
            elif dx > 0:
                yield (n.x, n.y, self.EAST)
            else:
                yield (n.x, n.y, self.WEST)

    def get_open_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        cell = self.cell(x, y)
        for n in cell.neighbors:
            if self.walls[cell.walls[n.coord]].is_open:
                yield (n.x, n.y)

    def open_walls(self) -> Iterator[Wall]:
        return (w for w in self.walls.values() if w.is_open)

    def open_wall_count(self) -> int:
        return sum(1 for _ in self.open_walls())

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __repr__(self):
        return f"Grid({self.width}x{self.height})"
