import struct
from typing import Iterator, Tuple

from maze_carver.core.errors import MazeFormatError

MAGIC = b"MAZELOG"

# Event Types
EVT_VISIT = 0x02
EVT_CARVE = 0x03


class EventWriter:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")

    def write_header(self, width: int, height: int):
        # Header: Magic "MAZELOG" + Width (4b) + Height (4b)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", width, height))

    def log_visit(self, x: int, y: int):
        # 1 byte type + 4b X + 4b Y
        self.file.write(struct.pack(">BII", EVT_VISIT, x, y))

    def log_carve(self, x: int, y: int, direction: int):
        # 1 byte type + 4b X + 4b Y + 1b Dir
        self.file.write(struct.pack(">BIIB", EVT_CARVE, x, y, direction))

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.width = 0
        self.height = 0

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise MazeFormatError(f"{self.filename}: not an event log")
        data = self.file.read(8)
        if len(data) != 8:
            raise MazeFormatError(f"{self.filename}: truncated header")
        self.width, self.height = struct.unpack(">II", data)
        return self.width, self.height

    def _read(self, size: int) -> bytes:
        data = self.file.read(size)
        if len(data) != size:
            raise MazeFormatError(f"{self.filename}: truncated event record")
        return data

    def stream_events(self) -> Iterator[Tuple[int, Tuple]]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = type_byte[0]

            if type_code == EVT_VISIT:
                yield (type_code, struct.unpack(">II", self._read(8)))
            elif type_code == EVT_CARVE:
                yield (type_code, struct.unpack(">IIB", self._read(9)))
            else:
                raise MazeFormatError(f"{self.filename}: unknown event type 0x{type_code:02x}")

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
