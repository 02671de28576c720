from __future__ import annotations

from typing import NamedTuple

from squaredle.grid import Grid, is_usable
from squaredle.lexicon import Lexicon

Coordinate = tuple[int, int]
Path = list[Coordinate]
ResultSet = dict[str, Path]

# Expansion order decides which path is kept when several spell the same word
DIRECTIONS: tuple[Coordinate, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


class FoundWord(NamedTuple):
    word: str
    path: Path


def find_words(grid: Grid, lexicon: Lexicon) -> ResultSet:
    """Map every word spelled by a simple adjacent path to the first path found.

    Cells are packed as ``row * width + col`` so the visited set of a branch is a
    bitmask. Positions past the end of a short row are treated as blank.
    The lexicon must already be fully built.
    """
    found: ResultSet = {}
    if not grid:
        return found

    # Rows that are not sequences of cells count as empty
    rows = [row if isinstance(row, (list, tuple, str)) else () for row in grid]
    height = len(rows)
    width = max((len(row) for row in rows), default=0)
    if width == 0:
        return found

    letters: list[str] = []
    for row in rows:
        for c in range(width):
            cell = row[c] if c < len(row) else ""
            letters.append(cell if is_usable(cell) else "")

    neighbors: list[list[int]] = []
    for idx in range(height * width):
        r, c = divmod(idx, width)
        adj = []
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < height and 0 <= nc < width and letters[nr * width + nc]:
                adj.append(nr * width + nc)
        neighbors.append(adj)

    path: list[int] = []

    def dfs(idx: int, word: str, visited: int):
        normalized = word.lower()
        if not lexicon.is_prefix(normalized):
            return

        path.append(idx)
        if word not in found and lexicon.is_word(normalized):
            found[word] = [divmod(i, width) for i in path]

        for nidx in neighbors[idx]:
            if not (visited & (1 << nidx)):
                dfs(nidx, word + letters[nidx], visited | (1 << nidx))

        path.pop()

    for start, letter in enumerate(letters):
        if letter:
            dfs(start, letter, 1 << start)

    return found


def solve(grid: Grid, lexicon: Lexicon) -> list[FoundWord]:
    """Solve the grid: all found words, shortest first, then in ordinal order."""
    found = find_words(grid, lexicon)
    return sorted(
        (FoundWord(word, path) for word, path in found.items()),
        key=lambda f: (len(f.word), f.word),
    )
