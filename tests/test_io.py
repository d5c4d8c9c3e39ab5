import unittest
import sys
import os
import tempfile
import shutil
import struct

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.errors import MazeFormatError
from maze_carver.algo.dfs import RecursiveBacktracker
from maze_carver.io.serializer import MazeSerializer

def open_keys(grid):
    return sorted(w.key for w in grid.open_walls())

class TestIO(unittest.TestCase):
    def setUp(self):
        self.out_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.out_dir, ignore_errors=True)

    def path(self, name):
        return os.path.join(self.out_dir, name)

    def test_round_trip_raw(self):
        grid = Grid(10, 7)
        RecursiveBacktracker(grid, seed=5).run_all()

        path = self.path("raw.maze")
        MazeSerializer.save(grid, path, meta={"seed": 5, "algo": "dfs"})

        grid2, meta = MazeSerializer.load(path)
        self.assertEqual((grid2.width, grid2.height), (10, 7))
        self.assertEqual(open_keys(grid), open_keys(grid2))
        self.assertEqual(grid2.visited_count(), 70)
        self.assertEqual(meta, {"seed": 5, "algo": "dfs"})

    def test_round_trip_compressed(self):
        grid = Grid(60, 40) # larger for compression
        RecursiveBacktracker(grid, seed=8).run_all()
        path = self.path("comp.maze")
        MazeSerializer.save(grid, path, compress=True)

        grid2, meta = MazeSerializer.load(path)
        self.assertEqual(open_keys(grid), open_keys(grid2))
        self.assertEqual(meta, {})

    def test_partial_state(self):
        grid = Grid(3, 3)
        grid.open_wall((1, 1), (1, 2))
        grid.set_visited(1, 1)

        path = self.path("partial.maze")
        MazeSerializer.save(grid, path)
        grid2, _ = MazeSerializer.load(path)
        self.assertEqual(open_keys(grid2), [((1, 1), (1, 2))])
        self.assertEqual([c.coord for c in grid2 if c.visited], [(1, 1)])

    def test_encoded_bits(self):
        grid = Grid(2, 2)
        grid.open_wall((0, 0), (1, 0))
        grid.open_wall((0, 0), (0, 1))
        data = MazeSerializer.encode_cells(grid)
        self.assertEqual(data[0], MazeSerializer.EAST_OPEN | MazeSerializer.SOUTH_OPEN)
        self.assertEqual(data[1:], b"\x00\x00\x00")

    def test_bad_magic(self):
        path = self.path("bad.maze")
        with open(path, "wb") as f:
            f.write(b"NOPE" + b"\x00" * 20)
        with self.assertRaises(MazeFormatError):
            MazeSerializer.load(path)

    def write_raw(self, name, width, height, data, meta=b"{}"):
        path = self.path(name)
        with open(path, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("<BB", MazeSerializer.VERSION, 0))
            f.write(struct.pack("<II", width, height))
            f.write(struct.pack("<H", len(meta)))
            f.write(meta)
            f.write(struct.pack("<I", len(data)))
            f.write(data)
        return path

    def test_east_through_border(self):
        path = self.write_raw("east.maze", 2, 1, bytes([0, MazeSerializer.EAST_OPEN]))
        with self.assertRaises(MazeFormatError):
            MazeSerializer.load(path)

    def test_south_through_border(self):
        path = self.write_raw("south.maze", 1, 2, bytes([MazeSerializer.SOUTH_OPEN, MazeSerializer.SOUTH_OPEN]))
        with self.assertRaises(MazeFormatError):
            MazeSerializer.load(path)

    def test_hand_written_file_loads(self):
        path = self.write_raw("ok.maze", 2, 1, bytes([MazeSerializer.EAST_OPEN, 0]), meta=b'{"seed": 1}')
        grid, meta = MazeSerializer.load(path)
        self.assertTrue(grid.is_open((0, 0), (1, 0)))
        self.assertEqual(meta, {"seed": 1})

    def test_bad_metadata(self):
        for meta in (b"{not json", b"\xff\xfe"):
            path = self.write_raw("meta.maze", 2, 2, bytes(4), meta=meta)
            with self.assertRaises(MazeFormatError):
                MazeSerializer.load(path)

    def test_truncated(self):
        grid = Grid(5, 5)
        path = self.path("trunc.maze")
        MazeSerializer.save(grid, path)
        with open(path, "rb") as f:
            data = f.read()
        with open(path, "wb") as f:
            f.write(data[:-3])
        with self.assertRaises(MazeFormatError):
            MazeSerializer.load(path)

if __name__ == '__main__':
    unittest.main()
