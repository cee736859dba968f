import random
from datetime import date

import pytest

from core.srs import Card, CardWriteError, ReviewLogError
from core.srs.database import CardStore, SqlCardStore, init_db

TODAY = date(2024, 1, 10)


class FakeCardStore(CardStore):
    """In-memory CardStore with failure injection."""

    def __init__(self, cards=None):
        self.cards = {card.id: card for card in (cards or [])}
        self.events = []
        self.card_writes = []
        self.fail_card_writes = 0  # number of upcoming card writes to fail
        self.fail_event_writes = 0

    def load_cards(self):
        return list(self.cards.values())

    def batch_save_card_fields(self, updates):
        if self.fail_card_writes:
            self.fail_card_writes -= 1
            raise CardWriteError("disk full", card_ids=[cid for cid, _ in updates])
        for card_id, state in updates:
            self.cards[card_id] = self.cards[card_id].with_state(state)
        self.card_writes.append(list(updates))

    def append_review_events(self, events):
        if self.fail_event_writes:
            self.fail_event_writes -= 1
            raise ReviewLogError("log offline")
        self.events.extend(events)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_card():
    """Factory for cards with sensible defaults."""
    counter = {"next": 1}

    def _make(**fields):
        if "id" not in fields:
            fields["id"] = counter["next"]
            counter["next"] += 1
        fields.setdefault("front", f"woord {fields['id']}")
        fields.setdefault("back", f"word {fields['id']}")
        return Card(**fields)

    return _make


@pytest.fixture
def fake_store():
    return FakeCardStore()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sql_store(tmp_path, monkeypatch):
    """SqlCardStore on a fresh SQLite file."""
    monkeypatch.delenv("TEST_MODE", raising=False)
    url = f"sqlite:///{tmp_path / 'flashcards.sqlite'}"
    init_db(url)
    return SqlCardStore(url, page_size=3)


@pytest.fixture
def make_store():
    """Factory for a FakeCardStore holding the given cards."""
    return FakeCardStore
