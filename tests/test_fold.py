import logging

import pytest

from checktext.config import Measure
from checktext.fold import BudgetTooSmallError, FoldAccumulator, fold_chunks, fold_partitions


def test_fold_keeps_everything_when_within_budget(marker: str) -> None:
    chunks = ["Hello\n", ", world!"]
    assert fold_chunks(chunks, 1000, Measure.BYTES, marker) == chunks


def test_fold_evicts_last_kept_chunk_to_fit_marker(marker: str) -> None:
    chunks = ["xxxxxxxxxx", "yyyyy", "zzzzzzz"]  # 10, 5, 7
    result = fold_chunks(chunks, 20, Measure.BYTES, marker)
    assert "".join(result) == "xxxxxxxxxxTruncated"


def test_fold_appends_marker_without_eviction_when_it_fits(marker: str) -> None:
    chunks = ["xxxxxxxxxx", "yyyyyyyyyyy"]  # 10, 11
    assert fold_chunks(chunks, 20, Measure.CHARS, marker) == ["xxxxxxxxxx", marker]


def test_fold_drops_all_chunks_after_first_overflow(marker: str) -> None:
    chunks = ["xxxxx", "yyyyyyyyyyyyyyyyyyy", "z"]  # "z" alone would fit
    assert "".join(fold_chunks(chunks, 20, Measure.CHARS, marker)) == "xxxxxTruncated"


def test_fold_evicts_at_most_one_chunk(marker: str) -> None:
    chunks = ["aaa", "bbb", "ccc", "dddddddddddddddddddd"]
    # 9 kept, overflow; 9 + 9 > 10 so "ccc" goes, and nothing else is re-checked
    assert fold_chunks(chunks, 10, Measure.CHARS, marker) == ["aaa", "bbb", marker]


def test_fold_with_only_marker_room(marker: str) -> None:
    assert fold_chunks(["xxxxxxxxxxxxxx\n"], 10, Measure.CHARS, marker) == [marker]


def test_fold_of_nothing_is_empty(marker: str) -> None:
    assert fold_chunks([], 10, Measure.BYTES, marker) == []


def test_fold_rejects_budget_smaller_than_marker(marker: str) -> None:
    with pytest.raises(BudgetTooSmallError, match="Maximum length is less than truncation text.") as excinfo:
        fold_chunks(["a"], 5, Measure.CHARS, marker)
    assert excinfo.value.max_size == 5
    assert excinfo.value.marker_size == 9
    assert isinstance(excinfo.value, ValueError)


def test_budget_check_happens_before_reading_chunks(marker: str) -> None:
    def chunks():
        raise AssertionError("chunks should not be consumed")
        yield  # pragma: no cover

    with pytest.raises(BudgetTooSmallError):
        fold_chunks(chunks(), 5, Measure.BYTES, marker)


def test_budget_check_uses_measure() -> None:
    snowman_marker = "E_TOO_MUCH_☃"  # 12 chars, 14 bytes
    assert fold_chunks([], 12, Measure.CHARS, snowman_marker) == []
    with pytest.raises(BudgetTooSmallError):
        fold_chunks([], 12, Measure.BYTES, snowman_marker)


def test_measure_sizes() -> None:
    assert Measure.CHARS.size("☃☃☃\n") == 4
    assert Measure.BYTES.size("☃☃☃\n") == 10


def test_accumulator_truncated_flag_is_sticky(marker: str) -> None:
    acc = FoldAccumulator(20, Measure.CHARS, marker)
    acc.add("x" * 15)
    acc.add("y" * 10)
    assert acc.truncated is True
    acc.add("z")
    assert acc.chunks == ["x" * 15]
    assert acc.total == 15
    assert acc.truncated is True


def test_accumulator_join_is_repeatable(marker: str) -> None:
    acc = FoldAccumulator(20, Measure.CHARS, marker).extend(["xxxxxxxxxx", "yyyyy", "zzzzzzz"])
    assert acc.join() == "xxxxxxxxxxTruncated"
    assert acc.join() == "xxxxxxxxxxTruncated"
    assert acc.chunks == ["xxxxxxxxxx", "yyyyy"]


def test_combine_replays_in_order(marker: str) -> None:
    left = FoldAccumulator(100, Measure.CHARS, marker).extend(["a", "b"])
    right = FoldAccumulator(100, Measure.CHARS, marker).extend(["c", "d"])
    assert left.combine(right).join() == "abcd"


def test_combine_is_not_commutative(marker: str) -> None:
    def make(chunks: list[str]) -> FoldAccumulator:
        return FoldAccumulator(100, Measure.CHARS, marker).extend(chunks)

    forward = make(["a", "b"]).combine(make(["c"])).join()
    backward = make(["c"]).combine(make(["a", "b"])).join()
    assert forward == "abc"
    assert backward == "cab"


def test_combine_overflows_on_replay(marker: str) -> None:
    left = FoldAccumulator(20, Measure.CHARS, marker).extend(["x" * 10])
    right = FoldAccumulator(20, Measure.CHARS, marker).extend(["y" * 5, "z" * 7])
    assert right.truncated is False
    merged = left.combine(right)
    assert merged.truncated is True
    assert merged.join() == "x" * 10 + marker


def test_combine_carries_truncation_of_right_partition(marker: str) -> None:
    left = FoldAccumulator(30, Measure.CHARS, marker).extend(["aa"])
    right = FoldAccumulator(30, Measure.CHARS, marker).extend(["bb", "c" * 40, "dd"])
    merged = left.combine(right)
    assert merged.truncated is True
    assert merged.join() == "aabb" + marker


def test_combine_rejects_mismatched_budgets(marker: str) -> None:
    left = FoldAccumulator(20, Measure.CHARS, marker)
    with pytest.raises(ValueError):
        left.combine(FoldAccumulator(21, Measure.CHARS, marker))
    with pytest.raises(ValueError):
        left.combine(FoldAccumulator(20, Measure.BYTES, marker))


@pytest.mark.parametrize("max_size", [9, 12, 20, 27, 40, 75, 200])
@pytest.mark.parametrize("measure", list(Measure))
def test_partitioned_fold_matches_single_fold(marker: str, max_size: int, measure: Measure) -> None:
    chunks = ["alpha\n", "☃☃\n", "gamma gamma\n", "d\n", "epsilon!\n", "zeta\n", "eta eta eta\n"]
    expected = fold_chunks(chunks, max_size, measure, marker)
    for split in range(len(chunks) + 1):
        for second in range(split, len(chunks) + 1):
            partitions = [chunks[:split], chunks[split:second], chunks[second:]]
            assert fold_partitions(partitions, max_size, measure, marker) == expected


def test_fold_partitions_of_nothing(marker: str) -> None:
    assert fold_partitions([], 20, Measure.BYTES, marker) == []


def test_fold_logs_truncation(marker: str, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="checktext.fold")
    fold_chunks(["xxxxxxxxxx", "yyyyy", "zzzzzzz"], 20, Measure.BYTES, marker)
    messages = [record.getMessage() for record in caplog.records if record.name == "checktext.fold"]
    assert messages == ["truncated to 19 bytes: kept=1 dropped=2 evicted=True"]
