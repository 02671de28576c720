"""
Solve a Squaredle grid from the command line.

Usage:
    python -m scripts.solve_grid <grid_file> [--dictionary PATH_OR_URL]

Examples:
    python -m scripts.solve_grid puzzles/today.txt
    echo -e "CAT\nSEA\nDOG" | python -m scripts.solve_grid - --min-length 4
    python -m scripts.solve_grid puzzles/today.txt --dictionary https://example.com/words.txt.gz --json

The grid file holds one row per line; spaces mark blank cells.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from squaredle.settings import settings
from squaredle.display import format_results
from squaredle.exceptions import LexiconLoadError
from squaredle.grid import format_grid, parse_grid
from squaredle.lexicon import load_lexicon
from squaredle.solver import solve


def main():
    parser = argparse.ArgumentParser(description="Squaredle Solver")
    parser.add_argument("grid", help="Path to a grid text file, or - for stdin")
    parser.add_argument("--dictionary", default=settings.dictionary_source,
                        help=f"Word list path or URL (default: {settings.dictionary_source})")
    parser.add_argument("--min-length", type=int, default=settings.MIN_WORD_LENGTH,
                        help=f"Hide words shorter than this (default: {settings.MIN_WORD_LENGTH})")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log dictionary loading")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.grid == "-":
        text = sys.stdin.read()
    else:
        grid_path = Path(args.grid)
        if not grid_path.exists():
            print(f"Error: {grid_path} does not exist")
            sys.exit(1)
        text = grid_path.read_text(encoding="utf-8")

    grid = parse_grid(text)
    if not grid:
        print("Error: grid is empty")
        sys.exit(1)

    try:
        lexicon = load_lexicon(args.dictionary, settings.HTTP_TIMEOUT)
    except LexiconLoadError as e:
        print(f"Error: {e}")
        sys.exit(1)

    results = [f for f in solve(grid, lexicon) if len(f.word) >= args.min_length]

    if args.json:
        print(json.dumps([{"word": f.word, "path": f.path} for f in results], indent=2))
        return

    print(format_grid(grid))
    print()
    print(f"{len(results)} words")
    print()
    print(format_results(results))


if __name__ == "__main__":
    main()
