import asyncio
import gzip
import threading

import httpx
import pytest

from squaredle.exceptions import LexiconLoadError, LexiconNotReady
from squaredle.lexicon import Lexicon, LexiconLoader, build_lexicon, load_lexicon, read_word_lines


def test_prefixes_and_words():
    lexicon = Lexicon.build(["dog", "do"])
    assert lexicon.is_prefix("d")
    assert lexicon.is_prefix("do")
    assert not lexicon.is_word("d")
    assert lexicon.is_word("do")
    assert lexicon.is_word("dog")
    assert not lexicon.is_prefix("dot")


def test_prefix_closure():
    lexicon = build_lexicon(["hello", "help", "a", "zebra"])
    assert lexicon.words <= lexicon.prefixes
    for word in lexicon.words:
        for k in range(1, len(word) + 1):
            assert lexicon.is_prefix(word[:k])


def test_normalizes_lines():
    lexicon = Lexicon.build(["  Cat\n", "DOG", "", "   ", "\tbird \r"])
    assert lexicon.words == {"cat", "dog", "bird"}
    assert len(lexicon) == 3
    assert "" not in lexicon.prefixes


def test_empty_lexicon():
    lexicon = Lexicon.build([])
    assert len(lexicon) == 0
    assert not lexicon.is_prefix("a")


def test_lexicon_is_immutable():
    lexicon = Lexicon.build(["cat"])
    with pytest.raises(AttributeError):
        lexicon.words = frozenset()


def test_read_plain_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("cat\ncats\n", encoding="utf-8")
    assert read_word_lines(path) == ["cat", "cats"]


def test_read_gzip_file(tmp_path):
    path = tmp_path / "words.txt.gz"
    path.write_bytes(gzip.compress(b"alpha\nbeta\n"))
    lexicon = load_lexicon(path)
    assert lexicon.words == {"alpha", "beta"}


def test_read_gzip_without_suffix(tmp_path):
    path = tmp_path / "words.bin"
    path.write_bytes(gzip.compress(b"gamma\n"))
    assert read_word_lines(path) == ["gamma"]


def test_missing_file(tmp_path):
    with pytest.raises(LexiconLoadError):
        load_lexicon(tmp_path / "nope.txt.gz")


def test_corrupt_gzip(tmp_path):
    path = tmp_path / "words.txt.gz"
    path.write_bytes(b"not gzip at all")
    with pytest.raises(LexiconLoadError):
        read_word_lines(path)


def test_read_from_url(monkeypatch):
    seen = {}

    def fake_get(url, **kwargs):
        seen["url"] = url
        return httpx.Response(200, content=gzip.compress(b"Web\nWords\n"),
                              request=httpx.Request("GET", url))

    monkeypatch.setattr(httpx, "get", fake_get)
    lexicon = load_lexicon("https://example.com/words.txt.gz")
    assert seen["url"] == "https://example.com/words.txt.gz"
    assert lexicon.words == {"web", "words"}


def test_url_http_error(monkeypatch):
    def fake_get(url, **kwargs):
        return httpx.Response(404, request=httpx.Request("GET", url))

    monkeypatch.setattr(httpx, "get", fake_get)
    with pytest.raises(LexiconLoadError):
        read_word_lines("https://example.com/missing.txt")


def test_loader_ready_after_load():
    loader = LexiconLoader()
    assert loader.state == LexiconLoader.IDLE
    with pytest.raises(LexiconNotReady):
        loader.lexicon

    async def run():
        loader.start(Lexicon.build, ["cat"])
        assert loader.state == LexiconLoader.LOADING
        return await loader.wait()

    lexicon = asyncio.run(run())
    assert loader.ready
    assert loader.state == LexiconLoader.READY
    assert loader.lexicon is lexicon
    assert lexicon.is_word("cat")


def test_loader_starts_once():
    calls = []

    def load(words):
        calls.append(words)
        return Lexicon.build(words)

    async def run():
        loader = LexiconLoader()
        first = loader.start(load, ["a"])
        second = loader.start(load, ["b"])
        assert first is second
        return await loader.wait()

    lexicon = asyncio.run(run())
    assert calls == [["a"]]
    assert lexicon.words == {"a"}


def test_loader_failure_is_not_empty_lexicon(tmp_path):
    loader = LexiconLoader()

    async def run():
        loader.start(load_lexicon, tmp_path / "missing.txt")
        await loader.wait()

    with pytest.raises(LexiconLoadError):
        asyncio.run(run())
    assert loader.state == LexiconLoader.FAILED
    assert not loader.ready
    assert isinstance(loader.error, LexiconLoadError)
    with pytest.raises(LexiconNotReady):
        loader.lexicon


def test_loader_ready_with():
    loader = LexiconLoader.ready_with(Lexicon.build([]))
    assert loader.ready
    assert len(loader.lexicon) == 0


def test_loader_close_cancels_pending_load():
    release = threading.Event()

    def slow_load():
        release.wait(5)
        return Lexicon.build(["late"])

    loader = LexiconLoader()

    async def run():
        task = loader.start(slow_load)
        await asyncio.sleep(0)
        await loader.close()
        release.set()
        assert task.cancelled()

    asyncio.run(run())
    assert loader.state == LexiconLoader.FAILED
    with pytest.raises(LexiconNotReady):
        loader.lexicon


def test_loader_close_after_load_is_noop():
    loader = LexiconLoader()

    async def run():
        loader.start(Lexicon.build, ["cat"])
        await loader.wait()
        await loader.close()

    asyncio.run(run())
    assert loader.state == LexiconLoader.READY
