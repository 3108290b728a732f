from datetime import datetime

import pytest

from betboard.numbers import Variant
from betboard.repositories.bet_repository import BetRepository
from betboard.services.promotion_service import PromotionService, is_slot_boundary
from tests.conftest import DAY, settled_records


@pytest.mark.parametrize(
    "hh_mm, expected",
    [("12:00", True), ("12:15", True), ("12:45", True), ("12:01", False), ("12:14", False)],
)
def test_is_slot_boundary(hh_mm, expected):
    assert is_slot_boundary(datetime.strptime(f"{DAY} {hh_mm}", "%Y-%m-%d %H:%M")) is expected


def test_promotes_only_the_closed_slot(bet_service, promotion_service, clock, store):
    clock.set("11:50")
    bet_service.submit_entry("01", 10, "jodi", DAY)
    clock.set("12:00")
    bet_service.submit_entry("02", 10, "jodi", DAY)
    clock.set("12:14", seconds=59)
    bet_service.submit_entry("03", 10, "jodi", DAY)
    clock.set("12:15")
    bet_service.submit_entry("04", 10, "jodi", DAY)

    result = promotion_service.promote_previous_slot(DAY, Variant.JODI)

    assert result.promoted == 2
    assert result.already_settled == 0
    assert result.cutoff == datetime(2025, 1, 31, 12, 15)
    assert sorted(r["number"] for r in settled_records(store)) == ["02", "03"]


def test_promotion_is_idempotent(bet_service, promotion_service, clock, store):
    clock.set("12:03")
    first = bet_service.submit_entry("11", 10, "jodi", DAY)
    second = bet_service.submit_entry("12", 20, "jodi", DAY)

    clock.set("12:15", seconds=2)
    promotion_service.promote_previous_slot(DAY, Variant.JODI)
    again = promotion_service.promote_previous_slot(DAY, Variant.JODI)

    assert again.promoted == 0
    assert again.already_settled == 2

    settled = settled_records(store)
    assert sorted(r["source_id"] for r in settled) == sorted([first["id"], second["id"]])


def test_settled_copy_leaves_original_untouched(bet_service, promotion_service, clock, store):
    clock.set("12:03")
    original = bet_service.submit_entry("33", 15, "jodi", DAY, actor_id="u9")
    clock.set("12:15")
    promotion_service.promote_previous_slot(DAY, Variant.JODI)

    [pending] = store.find("bets", {"settled": False})
    assert pending["id"] == original["id"]
    assert pending.get("promoted_at") is None

    [copy] = settled_records(store)
    assert copy["id"] != original["id"]
    assert copy["number"] == "33"
    assert copy["amount"] == 15
    assert copy["actor_id"] == "u9"
    assert copy["created_at"] == original["created_at"]
    assert copy["promoted_at"] == datetime(2025, 1, 31, 12, 15)


def test_variants_promote_independently(bet_service, promotion_service, clock, store):
    clock.set("12:03")
    bet_service.submit_entry("33", 15, "jodi", DAY)
    bet_service.submit_entry("3", 15, "single", DAY)
    clock.set("12:15")

    promotion_service.promote_previous_slot(DAY, Variant.SINGLE)

    assert [r["type"] for r in settled_records(store)] == ["single"]


class _BlindRepository(BetRepository):
    """Never sees existing settled copies, like a second writer racing the first."""

    def promoted_source_ids(self, settled):
        return set()


def test_concurrent_writer_cannot_settle_twice(bet_service, promotion_service, clock, store):
    clock.set("12:03")
    bet_service.submit_entry("44", 10, "jodi", DAY)
    clock.set("12:15")
    promotion_service.promote_previous_slot(DAY, Variant.JODI)

    racer = PromotionService(_BlindRepository(store), clock=clock)
    result = racer.promote_previous_slot(DAY, Variant.JODI)

    assert result.promoted == 0
    assert result.already_settled == 1
    assert len(settled_records(store)) == 1


def test_backlog_catches_up_missed_slots(bet_service, promotion_service, clock, store):
    for hh_mm, number in [("10:05", "01"), ("11:20", "02"), ("12:10", "03")]:
        clock.set(hh_mm)
        bet_service.submit_entry(number, 10, "jodi", DAY)

    clock.set("12:12")
    result = promotion_service.promote_backlog(DAY, Variant.JODI)

    assert result.promoted == 2
    assert result.cutoff == datetime(2025, 1, 31, 12, 0)
    assert sorted(r["number"] for r in settled_records(store)) == ["01", "02"]

    clock.set("12:30")
    result = promotion_service.promote_backlog(DAY, Variant.JODI)
    assert result.promoted == 1
    assert result.already_settled == 2


def test_nothing_to_promote(promotion_service):
    result = promotion_service.promote_previous_slot(DAY, Variant.JODI)

    assert result.promoted == 0
    assert result.already_settled == 0
