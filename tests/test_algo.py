import random
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.errors import MazeError
from maze_carver.core.analysis import MazeAnalyzer
from maze_carver.algo.dfs import RecursiveBacktracker

SIZES = [(1, 1), (1, 2), (2, 1), (1, 7), (7, 1), (2, 2), (3, 5), (8, 3), (20, 20)]

def carve(w, h, seed=42):
    grid = Grid(w, h)
    algo = RecursiveBacktracker(grid, seed=seed)
    algo.run_all()
    return grid, algo

def open_keys(grid):
    return sorted(w.key for w in grid.open_walls())

class TestRecursiveBacktracker(unittest.TestCase):
    def test_spanning_tree_edge_count(self):
        for w, h in SIZES:
            with self.subTest(size=(w, h)):
                grid, _ = carve(w, h)
                self.assertEqual(grid.open_wall_count(), w * h - 1)

    def test_connected(self):
        for w, h in SIZES:
            with self.subTest(size=(w, h)):
                grid, _ = carve(w, h, seed=7)
                for start in [(0, 0), (w - 1, h - 1), (w // 2, h // 2)]:
                    reached = MazeAnalyzer.reachable_cells(grid, start)
                    self.assertEqual(len(reached), w * h)
                self.assertTrue(MazeAnalyzer.is_perfect(grid))

    def test_every_cell_visited(self):
        for w, h in SIZES:
            with self.subTest(size=(w, h)):
                grid, _ = carve(w, h)
                self.assertEqual(grid.visited_count(), w * h)
                self.assertTrue(all(c.visited for c in grid))

    def test_stack_operations(self):
        for w, h in SIZES:
            with self.subTest(size=(w, h)):
                _, algo = carve(w, h)
                self.assertEqual(algo.push_count, w * h)
                self.assertEqual(algo.pop_count, w * h)
                self.assertEqual(algo.step_count, w * h - 1)

    def test_many_seeds(self):
        for seed in range(25):
            grid, _ = carve(6, 4, seed=seed)
            self.assertTrue(MazeAnalyzer.is_perfect(grid), f"seed {seed}")

    def test_determinism(self):
        grid1, _ = carve(10, 10, seed=12345)

        grid2 = Grid(10, 10)
        rec = RecursiveBacktracker(grid2, seed=12345)
        for _ in rec.run(): pass

        self.assertEqual(open_keys(grid1), open_keys(grid2))

    def test_different_seeds_differ(self):
        grid1, _ = carve(15, 15, seed=1)
        grid2, _ = carve(15, 15, seed=2)
        self.assertNotEqual(open_keys(grid1), open_keys(grid2))

    def test_injected_rng(self):
        grid1 = Grid(9, 6)
        RecursiveBacktracker(grid1, rng=random.Random(99)).run_all()
        grid2, _ = carve(9, 6, seed=99)
        self.assertEqual(open_keys(grid1), open_keys(grid2))

    def test_vertical_corridor(self):
        grid, _ = carve(1, 5)
        self.assertEqual(grid.open_wall_count(), 4)
        self.assertEqual(MazeAnalyzer.wall_orientations(grid), (4, 0))

    def test_horizontal_corridor(self):
        grid, _ = carve(5, 1, seed=3)
        self.assertEqual(MazeAnalyzer.wall_orientations(grid), (0, 4))

    def test_single_cell(self):
        grid, algo = carve(1, 1)
        self.assertEqual(len(grid.walls), 0)
        self.assertTrue(grid.is_visited(0, 0))
        self.assertEqual((algo.push_count, algo.pop_count), (1, 1))

    def test_long_corridor_no_recursion_limit(self):
        n = sys.getrecursionlimit() * 3
        grid, algo = carve(1, n)
        self.assertEqual(grid.open_wall_count(), n - 1)

    def test_run_yields_done(self):
        grid = Grid(30, 30)
        updates = list(RecursiveBacktracker(grid, seed=1).run())
        self.assertEqual(updates[-1], "Done")
        self.assertGreater(len(updates), 1)

    def test_refuses_carved_grid(self):
        grid, _ = carve(4, 4)
        with self.assertRaises(MazeError):
            RecursiveBacktracker(grid, seed=1).run_all()

if __name__ == '__main__':
    unittest.main()
