import argparse
import sys
import os
import logging

# Ensure project root is in path so we can import 'maze_carver' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.errors import MazeError


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Carver: randomized depth-first maze generator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--width", type=int, default=100, help="Maze Width")
    gen_parser.add_argument("--height", type=int, default=100, help="Maze Height")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--out", type=str, help="Save the maze to this file (optional)")
    gen_parser.add_argument("--compress", action="store_true", help="zlib-compress the saved maze")
    gen_parser.add_argument("--image", type=str, help="Write a PNG of the maze to this path (optional)")
    gen_parser.add_argument("--cell-size", type=int, default=10, help="Pixels per cell in the PNG")
    gen_parser.add_argument("--record-events", type=str, help="Save generation events to binary file")

    # Render Command
    render_parser = subparsers.add_parser("render", help="Render a saved maze to PNG")
    render_parser.add_argument("input_file", help="Path to maze file")
    render_parser.add_argument("output_file", help="Path to PNG output")
    render_parser.add_argument("--cell-size", type=int, default=10, help="Pixels per cell")

    # Info Command
    info_parser = subparsers.add_parser("info", help="Print statistics for a saved maze")
    info_parser.add_argument("input_file", help="Path to maze file")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Rebuild a maze from an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("output_file", help="Path to maze file to write")

    return parser


def cmd_generate(args, logger):
    from maze_carver.core.events import EventWriter
    from maze_carver.core.grid import Grid
    from maze_carver.algo.dfs import RecursiveBacktracker
    from maze_carver.core.analysis import MazeAnalyzer

    # Validate before opening any output file
    Grid.validate_dimensions(args.width, args.height)
    if args.image:
        from maze_carver.viz.image import MazeImageRenderer
        MazeImageRenderer.validate_settings(args.cell_size)

    evt_writer = None
    if args.record_events:
        evt_writer = EventWriter(args.record_events)
        logger.info(f"Recording events to {args.record_events}...")

    try:
        logger.info(f"Generating {args.width}x{args.height} maze...")
        grid = Grid(args.width, args.height, event_writer=evt_writer)
        generator = RecursiveBacktracker(grid, seed=args.seed)
        generator.run_all()
    finally:
        if evt_writer:
            evt_writer.close()

    logger.info(f"Opened {grid.open_wall_count()} walls, "
                f"{generator.push_count + generator.pop_count} stack operations")
    logger.info(f"Stats: {MazeAnalyzer.calculate_stats(grid)}")

    if args.out:
        from maze_carver.io.serializer import MazeSerializer
        logger.info(f"Saving maze to {args.out}...")
        meta = {"algo": "dfs", "seed": args.seed}
        MazeSerializer.save(grid, args.out, meta=meta, compress=args.compress)

    if args.image:
        from maze_carver.viz.image import MazeImageRenderer
        MazeImageRenderer(grid, cell_size=args.cell_size).save(args.image)

    print("Done.")


def cmd_render(args, logger):
    from maze_carver.io.serializer import MazeSerializer
    from maze_carver.viz.image import MazeImageRenderer

    logger.info(f"Loading {args.input_file}...")
    grid, meta = MazeSerializer.load(args.input_file)
    MazeImageRenderer(grid, cell_size=args.cell_size).save(args.output_file)


def cmd_info(args, logger):
    from maze_carver.io.serializer import MazeSerializer
    from maze_carver.core.analysis import MazeAnalyzer

    grid, meta = MazeSerializer.load(args.input_file)
    stats = MazeAnalyzer.calculate_stats(grid)

    print(f"Size:       {grid.width}x{grid.height} ({grid.width * grid.height:,} cells)")
    print(f"Meta:       {meta}")
    print(f"Open walls: {grid.open_wall_count()}")
    print(f"Perfect:    {MazeAnalyzer.is_perfect(grid)}")
    for key, value in stats.items():
        print(f"{key + ':':<12}{value:.2f}" if isinstance(value, float) else f"{key + ':':<12}{value}")


def cmd_replay(args, logger):
    from maze_carver.core.replay import replay
    from maze_carver.io.serializer import MazeSerializer

    logger.info(f"Replaying {args.event_file}...")
    grid = replay(args.event_file)
    MazeSerializer.save(grid, args.output_file, meta={"algo": "replay", "source": args.event_file})
    logger.info(f"Wrote {grid} to {args.output_file}")


COMMANDS = {
    "generate": cmd_generate,
    "render": cmd_render,
    "info": cmd_info,
    "replay": cmd_replay,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_carver")

    if args.command is None:
        parser.print_help()
        return 0

    logger.debug(f"Running command: {args.command}")
    try:
        COMMANDS[args.command](args, logger)
    except (MazeError, OSError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
