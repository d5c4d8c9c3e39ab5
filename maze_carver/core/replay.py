import logging
from typing import Iterator

from maze_carver.core.errors import MazeFormatError
from maze_carver.core.events import EVT_CARVE, EVT_VISIT, EventReader
from maze_carver.core.grid import Grid

logger = logging.getLogger(__name__)


class EventReplayer:
    """
    Applies a recorded event stream to a fresh Grid.
    Iterates like a Generator so callers can step through it.
    """
    def __init__(self, grid: Grid, reader: EventReader):
        self.grid = grid
        self.reader = reader
        self.event_count = 0

    def run(self) -> Iterator[str]:
        for type_code, data in self.reader.stream_events():
            self.event_count += 1

            try:
                if type_code == EVT_VISIT:
                    x, y = data
                    self.grid.set_visited(x, y)

                elif type_code == EVT_CARVE:
                    x, y, d = data
                    # Carves are logged from the north/west cell of the wall
                    if d not in (Grid.SOUTH, Grid.EAST):
                        raise MazeFormatError(
                            f"{self.reader.filename}: bad carve direction 0x{d:02x} at ({x}, {y})"
                        )
                    self.grid.open_wall((x, y), (x + Grid.DX[d], y + Grid.DY[d]))
            except IndexError as e:
                raise MazeFormatError(f"{self.reader.filename}: event {self.event_count}: {e}") from e

            if self.event_count % 50 == 0:
                yield "Replay"

        logger.debug("Replayed %d events", self.event_count)
        yield "Done"

    def run_all(self):
        for _ in self.run():
            pass


def replay(path: str) -> Grid:
    """Rebuilds a carved Grid from an event log file."""
    reader = EventReader(path)
    try:
        width, height = reader.read_header()
        grid = Grid(width, height)
        EventReplayer(grid, reader).run_all()
    finally:
        reader.close()
    return grid
