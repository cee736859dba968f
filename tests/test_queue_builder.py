import random
from datetime import date

from core.session_builders import (
    build_queue,
    count_introduced_today,
    partition_cards,
    summarize_day,
)
from core.session_builders.pool_utils import shuffled, take
from core.srs.dates import add_days


def _collection(make_card, today, due=0, new=0, introduced=0, ahead=0):
    cards = []
    cards += [make_card(stage="review", interval_days=3, due_date=today, first_seen=date(2023, 12, 1)) for _ in range(due)]
    cards += [make_card() for _ in range(new)]
    cards += [
        make_card(stage="learning", interval_days=1, first_seen=today, due_date=add_days(today, 1))
        for _ in range(introduced)
    ]
    cards += [
        make_card(stage="review", interval_days=5, first_seen=date(2023, 12, 1), due_date=add_days(today, 1))
        for _ in range(ahead)
    ]
    return cards


def test_due_cards_then_remaining_new_quota(make_card, today, rng):
    cards = _collection(make_card, today, due=5, new=20, introduced=3)
    due_ids = {card.id for card in cards[:5]}
    new_ids = {card.id for card in cards[5:25]}

    queue = build_queue(cards, today, max_new_per_day=10, rng=rng)

    assert len(queue) == 12
    assert {card.id for card in queue[:5]} == due_ids
    picked = [card.id for card in queue[5:]]
    assert len(picked) == len(set(picked)) == 7
    assert set(picked) <= new_ids


def test_all_suspended_gives_empty_queue(make_card, today):
    cards = [
        make_card(stage="review", due_date=date(2023, 1, 1), suspended=True),
        make_card(suspended=True),
    ]

    assert build_queue(cards, today, max_new_per_day=10) == []


def test_suspended_cards_are_skipped(make_card, today, rng):
    cards = _collection(make_card, today, due=2, new=2)
    hidden = make_card(stage="review", due_date=today, suspended=True)

    queue = build_queue(cards + [hidden], today, rng=rng)

    assert hidden.id not in {card.id for card in queue}
    assert len(queue) == 4


def test_no_card_appears_twice(make_card, today, rng):
    cards = _collection(make_card, today, due=4, new=6, ahead=3)

    queue = build_queue(cards, today, max_new_per_day=50, rng=rng, review_ahead=True)

    ids = [card.id for card in queue]
    assert len(ids) == len(set(ids)) == 13


def test_quota_already_used_up(make_card, today, rng):
    cards = _collection(make_card, today, due=1, new=5, introduced=12)

    queue = build_queue(cards, today, max_new_per_day=10, rng=rng)

    assert len(queue) == 1
    assert not queue[0].is_new


def test_zero_quota_excludes_new_cards(make_card, today, rng):
    cards = _collection(make_card, today, new=5)

    assert build_queue(cards, today, max_new_per_day=0, rng=rng) == []


def test_new_pool_smaller_than_quota(make_card, today, rng):
    cards = _collection(make_card, today, new=3)

    assert len(build_queue(cards, today, max_new_per_day=10, rng=rng)) == 3


def test_future_cards_are_not_queued_without_review_ahead(make_card, today, rng):
    cards = _collection(make_card, today, due=1, ahead=2)

    assert len(build_queue(cards, today, rng=rng)) == 1


def test_review_ahead_places_tomorrow_between_due_and_new(make_card, today, rng):
    cards = _collection(make_card, today, due=2, new=2, ahead=3)
    ahead_ids = {card.id for card in cards[4:]}

    queue = build_queue(cards, today, max_new_per_day=10, rng=rng, review_ahead=True)

    assert len(queue) == 7
    assert {card.id for card in queue[2:5]} == ahead_ids
    assert all(card.is_new for card in queue[5:])


def test_same_seed_same_order(make_card, today):
    cards = _collection(make_card, today, due=6, new=15)

    first = build_queue(cards, today, rng=random.Random(7))
    second = build_queue(cards, today, rng=random.Random(7))

    assert [c.id for c in first] == [c.id for c in second]


def test_count_introduced_today(make_card, today):
    cards = _collection(make_card, today, new=2, introduced=3, due=1)

    assert count_introduced_today(cards, today) == 3


def test_partition_cards(make_card, today):
    cards = _collection(make_card, today, due=2, new=3, ahead=1)

    partitions = partition_cards(cards, today, include_ahead=True)

    assert (len(partitions.due), len(partitions.ahead), len(partitions.new)) == (2, 1, 3)
    assert partitions.remaining_quota(2) == 2


def test_summarize_day(make_card, today):
    cards = _collection(make_card, today, due=4, new=20, introduced=3, ahead=2)

    summary = summarize_day(cards, today, max_new_per_day=10)

    assert summary.review_today == 4
    assert summary.new_today == 7
    # introduced-today cards are due tomorrow as well
    assert summary.review_tomorrow == 5
    assert summary.new_tomorrow == 10


def test_shuffled_returns_a_copy(rng):
    items = [1, 2, 3, 4, 5]

    result = shuffled(items, rng)

    assert sorted(result) == items
    assert items == [1, 2, 3, 4, 5]


def test_take_handles_non_positive_counts():
    assert take([1, 2, 3], 2) == [1, 2]
    assert take([1, 2, 3], 0) == []
    assert take([1, 2, 3], -4) == []
