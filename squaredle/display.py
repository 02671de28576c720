"""Pure helpers that shape solver output for rendering."""

from __future__ import annotations

from collections import defaultdict

from squaredle.solver import FoundWord, Path


def group_by_length(results: list[FoundWord]) -> dict[int, list[FoundWord]]:
    groups: dict[int, list[FoundWord]] = defaultdict(list)
    for found in results:
        groups[len(found.word)].append(found)
    return dict(groups)


def path_by_word(results: list[FoundWord]) -> dict[str, Path]:
    return {found.word: found.path for found in results}


def format_results(results: list[FoundWord]) -> str:
    blocks = []
    for length, group in group_by_length(results).items():
        lines = [f"{length} letters ({len(group)})"]
        lines.extend(f"  {found.word}" for found in group)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
