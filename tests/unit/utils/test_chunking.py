import pytest

from tracker.utils.chunking import chunked


def test_chunked_splits_into_bounded_batches():
    assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]


def test_chunked_exact_multiple_has_no_empty_tail():
    assert list(chunked(["a", "b", "c", "d"], 2)) == [["a", "b"], ["c", "d"]]


def test_chunked_empty_input_yields_nothing():
    assert list(chunked([], 400)) == []


def test_chunked_rejects_non_positive_size():
    with pytest.raises(ValueError):
        list(chunked([1, 2], 0))
