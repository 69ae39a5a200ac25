"""Command-line interface for the sudoku solver."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .benchmark import Benchmark
from .core.board import SudokuBoard, value_names
from .core.events import SolveSession
from .puzzles import TEST_GRIDS, sample_grid
from .reporter import ConsoleReporter, Display
from .solve import solve
from .solvers import Method, Scope

log = logging.getLogger(__name__)

# Exit status of an unusable input, as a C program returning -1
EXIT_BAD_INPUT = 255


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sudoku-logic",
        description="Sudoku solver explaining its deductions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a grid, showing the rules applied
  sudoku-logic solve -r "8..........36......7..9.2...5...7.......457.....1...3...1....68..85...1..9....4.."

  # Solve sample grid 7 by exact cover search
  sudoku-logic solve -E -T 7

  # Read the grid from standard input
  cat grid.txt | sudoku-logic solve -

Return value of solve:
  0  No solution was found.
  1  A solution was found, without using backtracking.
  2  A solution was found, using backtracking.
  3  A solution was found, using exact cover search.
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a sudoku grid")
    solve_parser.add_argument(
        "grid", nargs="?", default="-",
        help="Grid cells (value names, 0 or . for an empty cell, other characters "
             "ignored). Read from standard input if omitted or '-'"
    )
    solve_parser.add_argument(
        "-f", "--first", action="store_true",
        help="Search for the first solution only rather than all of them"
    )
    method_group = solve_parser.add_mutually_exclusive_group()
    method_group.add_argument(
        "-B", "--backtracking", action="store_true",
        help="Solve using backtracking method (brute force)"
    )
    method_group.add_argument(
        "-E", "--exact-cover", action="store_true",
        help="Solve using exact cover search method (dancing links)"
    )
    solve_parser.add_argument(
        "-g", "--grids", action="store_true",
        help="Display grid while processing"
    )
    solve_parser.add_argument(
        "-c", "--candidates", action="store_true",
        help="Display grid with candidates while processing"
    )
    solve_parser.add_argument(
        "-r", "--rules", action="store_true",
        help="Display logical rules"
    )
    solve_parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Completely quiet"
    )
    solve_parser.add_argument(
        "-T", "--test", type=int, default=None, metavar="N",
        help="Solve sample grid number N (the grid argument is ignored)"
    )
    solve_parser.add_argument(
        "--box-size", "-s", type=int, default=3, choices=[2, 3, 4, 5],
        help="Side of a box: 2 for 4x4 grids, 3 for 9x9 (default), 4 for 16x16, 5 for 25x25"
    )
    solve_parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Debug logging"
    )

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Compare the solving methods on the sample grids")
    bench_parser.add_argument(
        "--output", "-o", type=str, default="results",
        help="Output directory for results (default: results)"
    )
    bench_parser.add_argument(
        "--timeout", "-t", type=float, default=60.0,
        help="Maximum time per grid per method in seconds (default: 60)"
    )
    bench_parser.add_argument(
        "--box-size", "-s", type=int, default=3, choices=[2, 3, 4],
        help="Side of a box of the sample grids (default: 3)"
    )
    bench_parser.add_argument(
        "--all", action="store_true",
        help="Search for all solutions rather than the first one"
    )
    bench_parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Debug logging"
    )

    # Version command
    subparsers.add_parser("version", help="Display version")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "solve":
        sys.exit(cmd_solve(args))
    elif args.command == "benchmark":
        cmd_benchmark(args)
    elif args.command == "version":
        print(f"sudoku-logic {__version__}")


def _display(args) -> Display:
    display = Display.NONE
    if args.grids:
        display |= Display.GRIDS | Display.RULES
    if args.rules:
        display |= Display.RULES
    if args.candidates:
        display |= Display.CANDIDATES | Display.RULES
    return display


def cmd_solve(args) -> int:
    """Handle the solve command. Returns the process exit status."""
    size = args.box_size * args.box_size
    method = Method.EXACT_COVER if args.exact_cover else (
        Method.BACKTRACKING if args.backtracking else Method.ELIMINATION)
    scope = Scope.FIRST if args.first else Scope.ALL

    if not args.quiet:
        print("Method : {}.".format({
            Method.EXACT_COVER: "exact cover search (-E)",
            Method.BACKTRACKING: "backtracking (-B)",
            Method.ELIMINATION: "elimination of candidates",
        }[method]))
        print("Searching all solutions." if scope is Scope.ALL else "Searching first solution only (-f).")

    if args.test is not None:
        try:
            text = sample_grid(args.test, size)
        except ValueError:
            print(f"Invalid option argument for option -T: valid values between 1 and "
                  f"{len(TEST_GRIDS.get(size, []))}.", file=sys.stderr)
            return EXIT_BAD_INPUT
        if not args.quiet:
            print(f"Solving test grid #{args.test} (-T{args.test}, command line arguments ignored).")
    elif args.grid != "-":
        text = args.grid
    else:
        if not args.quiet:
            print(f"Type in the {size * size} cells ({value_names(size)}, 0 or . for an empty cell, "
                  "other characters, including space and end-of-line, ignored) and end with Control-D.")
        text = sys.stdin.read()

    try:
        board, ignored = SudokuBoard.parse(text, size)
    except ValueError as e:
        print(e, file=sys.stderr)
        return EXIT_BAD_INPUT
    if ignored:
        print(f"Warning: {ignored} values ignored from input stream.", file=sys.stderr)

    session = SolveSession()
    if not args.quiet:
        reporter = ConsoleReporter(_display(args))
        reporter.attach(session)
        print(reporter.describe())
        print(f"Grid is: {board.to_string()}")

    log.debug("Solving %dx%d grid with %s, scope %s", size, size, method.value, scope.value)
    result = solve(board.grid, method, scope, session, args.box_size)
    return result.exit_code


def cmd_benchmark(args):
    """Handle the benchmark command."""
    size = args.box_size * args.box_size
    benchmark = Benchmark(
        timeout_seconds=args.timeout,
        scope=Scope.ALL if args.all else Scope.FIRST,
        size=size,
    )

    print("=" * 60)
    print("SUDOKU SOLVER BENCHMARK")
    print("=" * 60)
    print(f"Grids: {len(benchmark.puzzles)} ({size}x{size})")
    print(f"Methods: {', '.join(m.value for m in benchmark.methods)}")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    benchmark.run()
    summary = benchmark.get_summary()

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)

    print("\nBy Method:")
    print("-" * 50)
    for algo, stats in summary["results_by_algorithm"].items():
        print(f"\n{algo}:")
        print(f"  Accuracy: {stats['accuracy']:.1f}% ({stats['total_solved']}/{stats['total_tested']})")
        print(f"  Avg Time: {stats['avg_time_seconds']:.4f}s")
        print(f"  Avg Hypotheses: {stats['avg_hypotheses']:.1f}")
        print(f"  Avg Memory: {stats['avg_memory_mb']:.2f} MB")

    benchmark.save_results(args.output)

    print("\n" + "=" * 60)
    print("Benchmark complete!")


if __name__ == "__main__":
    main()
