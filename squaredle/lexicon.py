from __future__ import annotations

import asyncio
import gzip
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

import httpx

from squaredle.exceptions import LexiconLoadError, LexiconNotReady

logger = logging.getLogger("squaredle")

GZIP_MAGIC = b"\x1f\x8b"


@dataclass(frozen=True)
class Lexicon:
    """Full-word set plus the set of every non-empty prefix of those words."""

    words: frozenset[str]
    prefixes: frozenset[str]

    @classmethod
    def build(cls, lines: Iterable[str]) -> Lexicon:
        words: set[str] = set()
        prefixes: set[str] = set()
        for line in lines:
            word = line.strip().lower()
            if not word:
                continue
            words.add(word)
            for end in range(1, len(word) + 1):
                prefixes.add(word[:end])
        return cls(frozenset(words), frozenset(prefixes))

    def is_word(self, s: str) -> bool:
        return s in self.words

    def is_prefix(self, s: str) -> bool:
        return s in self.prefixes

    def __len__(self) -> int:
        return len(self.words)


def build_lexicon(lines: Iterable[str]) -> Lexicon:
    return Lexicon.build(lines)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _decode(payload: bytes, name: str) -> list[str]:
    try:
        if name.endswith(".gz") or payload[:2] == GZIP_MAGIC:
            payload = gzip.decompress(payload)
        text = payload.decode("utf-8")
    except (OSError, EOFError, UnicodeDecodeError) as exc:
        raise LexiconLoadError(f"Could not decode word list {name}: {exc}") from exc
    return text.splitlines()


def read_word_lines(source: str | Path, timeout: float = 30.0) -> list[str]:
    """Return the raw lines of a word list.

    ``source`` is either a filesystem path or an ``http(s)://`` URL. Payloads
    named ``*.gz`` or carrying the gzip magic bytes are decompressed first.
    """
    name = str(source)
    if _is_url(name):
        try:
            resp = httpx.get(name, timeout=timeout, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise LexiconLoadError(f"Could not fetch word list {name}: {exc}") from exc
        payload = resp.content
        name = httpx.URL(name).path
    else:
        try:
            payload = Path(source).read_bytes()
        except OSError as exc:
            raise LexiconLoadError(f"Missing word list: {source}") from exc
    return _decode(payload, name)


def load_lexicon(source: str | Path, timeout: float = 30.0) -> Lexicon:
    t0 = time.perf_counter()
    lexicon = Lexicon.build(read_word_lines(source, timeout))
    logger.info(
        "Lexicon loaded from %s: %d words, %d prefixes (%.1fms)",
        source, len(lexicon.words), len(lexicon.prefixes),
        (time.perf_counter() - t0) * 1000,
    )
    return lexicon


class LexiconLoader:
    """One-shot background load of a :class:`Lexicon`.

    The loader is the only place readiness lives: ``lexicon`` raises
    :class:`LexiconNotReady` until the load succeeds, and a failed load stays
    failed instead of degrading to an empty lexicon.
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"

    def __init__(self):
        self._task: asyncio.Task | None = None
        self._lexicon: Lexicon | None = None
        self._error: BaseException | None = None

    @classmethod
    def ready_with(cls, lexicon: Lexicon) -> LexiconLoader:
        loader = cls()
        loader._lexicon = lexicon
        return loader

    @property
    def state(self) -> str:
        if self._lexicon is not None:
            return self.READY
        if self._error is not None:
            return self.FAILED
        if self._task is not None:
            return self.LOADING
        return self.IDLE

    @property
    def ready(self) -> bool:
        return self._lexicon is not None

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def lexicon(self) -> Lexicon:
        if self._lexicon is None:
            raise LexiconNotReady(f"Lexicon is not ready (state={self.state})")
        return self._lexicon

    def start(self, load: Callable[..., Lexicon], *args) -> asyncio.Task | None:
        """Schedule ``load(*args)`` in a worker thread. Only the first call has any effect."""
        if self._task is not None or self._lexicon is not None:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run(load, *args))
        return self._task

    async def _run(self, load: Callable[..., Lexicon], *args) -> None:
        try:
            self._lexicon = await asyncio.to_thread(load, *args)
        except Exception as exc:
            self._error = exc
            logger.error("Lexicon load failed: %s", exc)

    async def close(self) -> None:
        """Cancel a load that is still running. A cancelled load ends up ``failed``."""
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            self._error = LexiconLoadError("Lexicon load cancelled")
            logger.warning("Lexicon load cancelled before it finished")

    async def wait(self) -> Lexicon:
        if self._task is not None:
            await self._task
        if self._error is not None:
            raise LexiconLoadError(str(self._error)) from self._error
        return self.lexicon
