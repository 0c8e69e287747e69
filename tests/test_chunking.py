import pytest

from checktext.chunking import LineChunks, VerbatimChunks, split_lines, strategy_for
from checktext.config import ChunkMode


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", []),
        ("Hello", ["Hello"]),
        ("a\nb\n", ["a\n", "b\n"]),
        ("a\r\nb\nc", ["a\r\n", "b\n", "c"]),
        ("\n\n", ["\n", "\n"]),
        ("a\rb", ["a\rb"]),
        ("x y", ["x y"]),
    ],
)
def test_split_lines(text: str, expected: list[str]) -> None:
    chunks = split_lines(text)
    assert chunks == expected
    assert "".join(chunks) == text


def test_line_chunks_join_pieces_before_splitting() -> None:
    strategy = LineChunks(("wwww\n", "xxxx\nyy", "yy\nzzzzz\n"))
    assert strategy.chunks() == ["wwww\n", "xxxx\n", "yyyy\n", "zzzzz\n"]
    assert strategy.text() == "wwww\nxxxx\nyyyy\nzzzzz\n"


def test_verbatim_chunks_keep_pieces_whole() -> None:
    strategy = VerbatimChunks(("| a | b |\n|---|---|\n", "```\ncode\n```\n"))
    assert strategy.chunks() == ["| a | b |\n|---|---|\n", "```\ncode\n```\n"]


def test_chunks_are_fresh_lists() -> None:
    strategy = VerbatimChunks(("a", "b"))
    first = strategy.chunks()
    first.reverse()
    assert strategy.chunks() == ["a", "b"]


def test_strategy_for_mode() -> None:
    assert isinstance(strategy_for(ChunkMode.VERBATIM, ["a"]), VerbatimChunks)
    assert isinstance(strategy_for(ChunkMode.LINES, ["a"]), LineChunks)
