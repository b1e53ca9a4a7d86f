import pytest

from backend.app.domain.journal.stats import (
    JournalStats,
    compute_stats,
    count_words,
    round_half_up,
)

pytestmark = [pytest.mark.journal_store]


def test_compute_stats_empty() -> None:
    assert compute_stats([]) == JournalStats.empty()


def test_compute_stats_rounds_half_up() -> None:
    stats = compute_stats([("2024-01-02", "a b"), ("2024-01-01", "c d e")])

    assert stats.total_words == 5
    assert stats.avg_words_per_entry == 3
    assert stats.first_entry_date == "2024-01-01"
    assert stats.last_entry_date == "2024-01-02"


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("one", 1),
        ("two  words", 2),
        ("tabs\tand\nnewlines  too", 4),
        ("   ", 0),
    ],
)
def test_count_words_splits_on_any_whitespace(content: str, expected: int) -> None:
    assert count_words(content) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (3.0, 3)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected
