from datetime import date

import pytest

from app.session_controller import SessionController
from app.session_types import SessionState
from core.settings import StudySettings
from core.srs import CardStage, CardWriteError, InvalidRatingError, Rating, SessionStateError


def _controller(store, rng, today, **settings):
    return SessionController(
        store,
        settings=StudySettings(**settings),
        rng=rng,
        clock=lambda: today,
        retry_delay=0,
    )


def _due_cards(make_card, today, count):
    return [
        make_card(stage="review", interval_days=4, first_seen=date(2023, 12, 1), due_date=today)
        for _ in range(count)
    ]


def test_full_session_flow(make_card, today, rng, make_store):
    store = make_store(_due_cards(make_card, today, 1) + [make_card(), make_card()])
    controller = _controller(store, rng, today)

    assert controller.start() == SessionState.PRESENTING
    assert controller.total == 3

    results = []
    while controller.current_card is not None:
        controller.reveal()
        results.append(controller.grade(Rating.GOOD))

    summary = results[-1].summary
    assert summary is not None
    assert all(result.summary is None for result in results[:-1])
    assert (summary.graded, summary.new_count, summary.review_count) == (3, 2, 1)
    assert summary.completed
    assert summary.events_unsaved == 0
    assert controller.state == SessionState.IDLE
    assert controller.last_summary == summary

    assert len(store.events) == 3
    assert all(card.last_reviewed == today for card in store.cards.values())
    assert all(card.stage == CardStage.REVIEW for card in store.cards.values())


def test_grade_updates_card_locally(make_card, today, rng, make_store):
    store = make_store([make_card(), make_card()])
    controller = _controller(store, rng, today)
    controller.start()
    card = controller.current_card

    result = controller.grade("easy")

    assert result.card.id == card.id
    assert result.card.interval_days == 4
    assert result.review_type == "new"
    assert controller.cards[card.id].stage == CardStage.REVIEW
    # still buffered: below the batch size
    assert not result.flushed
    assert controller.pending_writes == 1
    assert store.card_writes == []


def test_reveal_returns_back_side(make_card, today, rng, make_store):
    store = make_store([make_card(front="de fiets", back="the bicycle")])
    controller = _controller(store, rng, today)
    controller.start()

    assert controller.reveal() == "the bicycle"
    assert controller.revealed


def test_nothing_due(make_card, today, rng, make_store):
    store = make_store([make_card(stage="review", due_date=date(2024, 2, 1), first_seen=date(2023, 12, 1))])
    controller = _controller(store, rng, today)

    assert controller.start() == SessionState.IDLE
    assert controller.nothing_due
    assert controller.current_card is None
    with pytest.raises(SessionStateError):
        controller.grade(Rating.GOOD)


def test_start_while_active_is_rejected(make_card, today, rng, make_store):
    controller = _controller(make_store([make_card()]), rng, today)
    controller.start()

    with pytest.raises(SessionStateError):
        controller.start()


def test_invalid_rating_changes_nothing(make_card, today, rng, make_store):
    store = make_store([make_card(), make_card()])
    controller = _controller(store, rng, today)
    controller.start()
    card = controller.current_card

    with pytest.raises(InvalidRatingError):
        controller.grade("perfect")

    assert controller.current_card.id == card.id
    assert controller.position == 0
    assert controller.graded == 0
    assert controller.pending_writes == 0


def test_writes_are_batched(make_card, today, rng, make_store):
    store = make_store(_due_cards(make_card, today, 7))
    controller = _controller(store, rng, today, flush_batch_size=5)
    controller.start()

    for _ in range(4):
        controller.grade(Rating.GOOD)
    assert store.card_writes == []

    result = controller.grade(Rating.GOOD)
    assert result.flushed
    assert len(store.card_writes) == 1
    assert len(store.card_writes[0]) == 5
    assert len(store.events) == 5
    assert controller.pending_writes == 0


def test_transient_write_failure_is_retried(make_card, today, rng, make_store):
    store = make_store(_due_cards(make_card, today, 2))
    controller = _controller(store, rng, today, flush_batch_size=1)
    controller.start()
    store.fail_card_writes = 2

    result = controller.grade(Rating.GOOD)

    assert result.flushed
    assert len(store.card_writes) == 1


def test_card_write_failure_keeps_buffer(make_card, today, rng, make_store):
    store = make_store(_due_cards(make_card, today, 8))
    controller = _controller(store, rng, today, flush_batch_size=5, write_retries=3)
    controller.start()
    for _ in range(4):
        controller.grade(Rating.GOOD)
    store.fail_card_writes = 3

    with pytest.raises(CardWriteError):
        controller.grade(Rating.GOOD)

    # the grade itself was applied and the queue advanced
    assert controller.position == 5
    assert controller.pending_writes == 5
    assert store.card_writes == []
    assert controller.state == SessionState.PRESENTING

    result = controller.grade(Rating.GOOD)
    assert result.flushed
    assert controller.pending_writes == 0
    assert len(store.card_writes[0]) == 6


def test_failed_final_write_blocks_completion(make_card, today, rng, make_store):
    store = make_store([make_card()])
    controller = _controller(store, rng, today, write_retries=2)
    controller.start()
    store.fail_card_writes = 2

    with pytest.raises(CardWriteError):
        controller.grade(Rating.GOOD)

    assert controller.state == SessionState.FLUSHING
    assert controller.last_summary is None
    assert controller.pending_writes == 1

    summary = controller.finish()
    assert summary.graded == 1
    assert summary.completed
    assert controller.state == SessionState.IDLE
    assert store.cards[1].stage == CardStage.REVIEW


def test_review_log_failure_is_retried_on_next_flush(make_card, today, rng, make_store):
    store = make_store(_due_cards(make_card, today, 3))
    controller = _controller(store, rng, today, flush_batch_size=1, write_retries=1)
    controller.start()
    store.fail_event_writes = 1

    first = controller.grade(Rating.GOOD)

    assert first.flushed
    assert store.events == []

    controller.grade(Rating.HARD)
    assert len(store.events) == 2


def test_review_log_failure_on_finish_is_counted(make_card, today, rng, make_store):
    store = make_store([make_card(), make_card()])
    controller = _controller(store, rng, today, write_retries=1)
    controller.start()
    controller.grade(Rating.AGAIN)
    store.fail_event_writes = 1

    result = controller.grade(Rating.GOOD)

    summary = result.summary
    assert summary is not None
    assert summary.events_unsaved == 2
    assert summary.again_count == 1
    assert summary.accuracy == pytest.approx(0.5)
    assert len(store.card_writes) == 1


def test_finish_early(make_card, today, rng, make_store):
    store = make_store(_due_cards(make_card, today, 4))
    controller = _controller(store, rng, today)
    controller.start()
    controller.grade(Rating.GOOD)
    controller.grade(Rating.AGAIN)

    summary = controller.finish()

    assert summary.graded == 2
    assert summary.review_count == 2
    assert not summary.completed
    assert len(store.card_writes) == 1
    assert len(store.events) == 2
    assert controller.state == SessionState.IDLE


def test_abandon_without_grades(make_card, today, rng, make_store):
    controller = _controller(make_store([make_card()]), rng, today)
    controller.start()

    summary = controller.abandon()

    assert summary.graded == 0
    assert summary.accuracy is None


def test_finish_when_idle_is_rejected(fake_store, today, rng):
    controller = _controller(fake_store, rng, today)

    with pytest.raises(SessionStateError):
        controller.finish()


def test_new_quota_uses_settings(make_card, today, rng, make_store):
    store = make_store([make_card() for _ in range(6)])
    controller = _controller(store, rng, today, max_new_per_day=4)

    controller.start()

    assert controller.total == 4


def test_each_event_carries_session_position(make_card, today, rng, make_store):
    store = make_store([make_card(), make_card()])
    controller = _controller(store, rng, today)
    controller.start()
    session_id = controller.session_id

    controller.grade(Rating.GOOD)
    controller.grade(Rating.GOOD)

    assert [event["session_position"] for event in store.events] == [0, 1]
    assert {event["session_id"] for event in store.events} == {session_id}


def test_progress_tracks_position(make_card, today, rng, make_store):
    controller = _controller(make_store([make_card() for _ in range(3)]), rng, today)
    controller.start()

    controller.grade(Rating.GOOD)

    assert controller.progress == (1, 3)
    assert controller.remaining == 2


def test_start_uses_injected_clock(make_card, today, rng, make_store):
    later = date(2024, 3, 1)
    card = make_card(stage="review", interval_days=10, first_seen=date(2023, 12, 1), due_date=date(2024, 2, 20))
    controller = SessionController(make_store([card]), rng=rng, clock=lambda: later, retry_delay=0)

    controller.start()

    assert controller.today == later
    assert controller.current_card.id == card.id
