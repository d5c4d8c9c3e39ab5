import json
import logging
import struct
import zlib
from typing import Any, Dict, Optional, Tuple

from maze_carver.core.errors import MazeFormatError
from maze_carver.core.grid import Grid

logger = logging.getLogger(__name__)


class MazeSerializer:
    MAGIC = b"MAZE"
    VERSION = 1

    # Flags
    FLAG_COMPRESSED = 1

    # Per-cell bits
    EAST_OPEN  = 0b001
    SOUTH_OPEN = 0b010
    VISITED    = 0b100

    @staticmethod
    def encode_cells(grid: Grid) -> bytes:
        data = bytearray(grid.width * grid.height)
        for wall in grid.open_walls():
            (x, y), _ = wall.key
            bit = MazeSerializer.SOUTH_OPEN if wall.direction == Grid.SOUTH else MazeSerializer.EAST_OPEN
            data[y * grid.width + x] |= bit
        for i, cell in enumerate(grid.cells):
            if cell.visited:
                data[i] |= MazeSerializer.VISITED
        return bytes(data)

    @staticmethod
    def decode_cells(grid: Grid, data: bytes):
        if len(data) != grid.width * grid.height:
            raise MazeFormatError(
                f"Cell data has {len(data)} bytes, expected {grid.width * grid.height}"
            )
        for i, val in enumerate(data):
            x, y = i % grid.width, i // grid.width
            if val & MazeSerializer.VISITED:
                grid.cells[i].mark_visited()
            if val & MazeSerializer.EAST_OPEN:
                if x == grid.width - 1:
                    raise MazeFormatError(f"Cell ({x}, {y}) opens east through the border")
                grid.open_wall((x, y), (x + 1, y))
            if val & MazeSerializer.SOUTH_OPEN:
                if y == grid.height - 1:
                    raise MazeFormatError(f"Cell ({x}, {y}) opens south through the border")
                grid.open_wall((x, y), (x, y + 1))

    @staticmethod
    def save(grid: Grid, filepath: str, meta: Optional[Dict[str, Any]] = None, compress=False):
        """
        Saves the maze to a binary file.
        Format:
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - WIDTH (4 bytes)
        - HEIGHT (4 bytes)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes)
        - DATA (compressed or raw, one byte per cell)
        """
        if meta is None:
            meta = {}

        flags = 0
        if compress:
            flags |= MazeSerializer.FLAG_COMPRESSED

        meta_bytes = json.dumps(meta).encode('utf-8')

        data = MazeSerializer.encode_cells(grid)
        if compress:
            data = zlib.compress(data)

        with open(filepath, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("<BB", MazeSerializer.VERSION, flags))
            f.write(struct.pack("<II", grid.width, grid.height))
            f.write(struct.pack("<H", len(meta_bytes)))
            f.write(meta_bytes)
            f.write(struct.pack("<I", len(data)))
            f.write(data)

        logger.debug("Wrote %s to %s (%d data bytes)", grid, filepath, len(data))

    @staticmethod
    def _read(f, size: int) -> bytes:
        data = f.read(size)
        if len(data) != size:
            raise MazeFormatError("Unexpected end of file")
        return data

    @staticmethod
    def load(filepath: str) -> Tuple[Grid, Dict[str, Any]]:
        read = MazeSerializer._read
        with open(filepath, "rb") as f:
            if f.read(4) != MazeSerializer.MAGIC:
                raise MazeFormatError(f"{filepath}: invalid file format")

            version, flags = struct.unpack("<BB", read(f, 2))
            if version != MazeSerializer.VERSION:
                raise MazeFormatError(f"{filepath}: unsupported version {version}")

            width, height = struct.unpack("<II", read(f, 8))
            meta_len = struct.unpack("<H", read(f, 2))[0]
            try:
                meta = json.loads(read(f, meta_len).decode('utf-8'))
            except ValueError as e:
                raise MazeFormatError(f"{filepath}: corrupt metadata") from e

            data_len = struct.unpack("<I", read(f, 4))[0]
            data = read(f, data_len)

        if flags & MazeSerializer.FLAG_COMPRESSED:
            try:
                data = zlib.decompress(data)
            except zlib.error as e:
                raise MazeFormatError(f"{filepath}: corrupt cell data") from e

        grid = Grid(width, height)
        MazeSerializer.decode_cells(grid, data)
        return grid, meta
