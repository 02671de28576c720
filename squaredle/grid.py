from __future__ import annotations

Grid = list[list[str]]


def is_usable(cell) -> bool:
    """A usable cell holds exactly one non-blank character."""
    return isinstance(cell, str) and len(cell) == 1 and not cell.isspace()


def parse_grid(text: str) -> Grid:
    """Turn typed puzzle text into rows of uppercase single-character cells.

    Spaces stay in place as blank cells so the columns of later letters line up.
    """
    lines = text.upper().replace("\r", "").split("\n")
    while lines and not lines[-1].strip():
        lines.pop()
    return [list(line) for line in lines]


def grid_from_rows(rows) -> Grid:
    """Accept rows as strings or as lists of cells (the two JSON shapes clients send)."""
    grid: Grid = []
    for row in rows:
        if isinstance(row, str):
            grid.append(list(row.upper()))
        elif isinstance(row, (list, tuple)):
            cells = []
            for cell in row:
                if not isinstance(cell, str) or not cell:
                    cells.append(" ")
                elif len(cell) > 1:
                    raise ValueError(f"Grid cells must be single characters, got {cell!r}")
                else:
                    cells.append(cell.upper())
            grid.append(cells)
        else:
            raise ValueError(f"Grid rows must be strings or lists, got {type(row).__name__}")
    return grid


def format_grid(grid: Grid) -> str:
    return "\n".join("".join(c if is_usable(c) else "." for c in row) for row in grid)
