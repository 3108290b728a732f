import random
from datetime import datetime

from betboard.aggregation import group_by_slot_key, summarize
from betboard.numbers import legal_numbers


def _entry(number, amount, actor_id=None, minute=7):
    e = {"number": number, "amount": amount, "created_at": datetime(2025, 1, 31, 12, minute)}
    if actor_id is not None:
        e["actor_id"] = actor_id
    return e


def test_every_legal_number_present_without_entries():
    items = summarize([], "jodi")

    assert [i.number for i in items] == legal_numbers("jodi")
    assert all(i.total == 0 and i.user_count == 0 and i.min_amount == 0 for i in items)


def test_totals_users_and_min_amount():
    entries = [
        _entry("05", 100, "u1"),
        _entry("05", 40, "u1"),
        _entry("05", 60, "u2"),
        _entry("07", 25),
        _entry("07", 25),
    ]
    by_number = {i.number: i for i in summarize(entries, "jodi")}

    assert by_number["05"].total == 200
    assert by_number["05"].user_count == 2
    assert by_number["05"].min_amount == 40

    # anonymous entries are never merged into one user
    assert by_number["07"].user_count == 2
    assert by_number["07"].total == 50


def test_order_independent():
    entries = [_entry(f"{n:02d}", n * 10, f"u{n % 4}") for n in range(1, 40)]
    entries += [_entry("03", 5), _entry("03", 7, "u1")]
    expected = summarize(entries, "jodi")

    rng = random.Random(1234)
    for _ in range(5):
        shuffled = list(entries)
        rng.shuffle(shuffled)
        assert summarize(shuffled, "jodi") == expected


def test_illegal_numbers_are_ignored():
    items = summarize([_entry("00", 10), _entry("0", 10)], "jodi")

    assert len(items) == 99
    assert sum(i.total for i in items) == 0


def test_single_variant_output_order():
    items = summarize([_entry("9", 10), _entry("1", 5)], "single")
    assert [i.number for i in items] == legal_numbers("single")


def test_group_by_slot_key():
    entries = [_entry("01", 1, minute=0), _entry("02", 1, minute=14), _entry("03", 1, minute=15)]
    grouped = group_by_slot_key(entries)

    assert sorted(grouped) == [datetime(2025, 1, 31, 12, 15), datetime(2025, 1, 31, 12, 30)]
    assert len(grouped[datetime(2025, 1, 31, 12, 15)]) == 2
