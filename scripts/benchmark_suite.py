import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.algo.dfs import RecursiveBacktracker
from maze_carver.core.analysis import MazeAnalyzer

def benchmark_size(width: int, height: int):
    print(f"\n--- Benchmarking {width}x{height} ({width*height/1e6:.2f}M cells) ---")

    # 1. Construction
    start_time = time.time()
    grid = Grid(width, height)
    print(f"Grid Init: {time.time() - start_time:.4f}s ({len(grid.walls):,} walls)")

    # 2. Carving
    algo = RecursiveBacktracker(grid, seed=42)
    gen_start = time.time()
    algo.run_all()
    gen_time = time.time() - gen_start
    print(f"Generation Time: {gen_time:.4f}s")
    print(f"Speed: {(width*height)/gen_time:,.0f} cells/sec")

    # 3. Verify
    verify_start = time.time()
    perfect = MazeAnalyzer.is_perfect(grid)
    print(f"Perfect: {perfect} (checked in {time.time() - verify_start:.4f}s)")
    print(f"Stats: {MazeAnalyzer.calculate_stats(grid)}")

def run_suite():
    sizes = [
        (100, 100),
        (1, 10000),
        (500, 500),
        (1000, 1000),
    ]

    for w, h in sizes:
        benchmark_size(w, h)

if __name__ == "__main__":
    run_suite()
