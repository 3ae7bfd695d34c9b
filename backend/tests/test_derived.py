from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from flyover_cms.domain.derived import (
    EventScheduleRule,
    OrderDefaultRule,
    PublishedAtRule,
    ReadTimeRule,
    RuleContext,
    SequenceRule,
    calculate_read_time,
    next_sequence,
)
from flyover_cms.domain.exceptions import InvalidTransition
from flyover_cms.domain.lifecycle import (
    CONTENT_LIFECYCLE,
    EVENT_LIFECYCLE,
    REGISTRATION_LIFECYCLE,
)
from flyover_cms.utils.dates import utc_now

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def ctx():
    return RuleContext(collection=mongomock.MongoClient().db.items, now=NOW)


@pytest.mark.parametrize(
    "words, expected",
    [(0, "0 min read"), (1, "1 min read"), (200, "1 min read"), (201, "2 min read"), (400, "2 min read")],
)
def test_calculate_read_time(words, expected):
    assert calculate_read_time(" ".join(["word"] * words)) == expected


def test_next_sequence_starts_at_one_and_follows_the_max(ctx):
    assert next_sequence(ctx.collection, "id") == 1
    ctx.collection.insert_many([{"id": 3}, {"id": 7}, {"name": "no id"}])
    assert next_sequence(ctx.collection, "id") == 8


def test_sequence_and_order_defaults(ctx):
    ctx.collection.insert_one({"id": 4, "order": 2})

    doc = {"name": "New"}
    SequenceRule().on_create(doc, ctx)
    OrderDefaultRule().on_create(doc, ctx)
    assert doc == {"name": "New", "id": 5, "order": 3}

    explicit = {"order": 0}
    OrderDefaultRule().on_create(explicit, ctx)
    assert explicit["order"] == 0


def test_read_time_recomputed_only_when_content_changes(ctx):
    rule = ReadTimeRule()
    existing = {"content": "one two", "readTime": "1 min read"}

    changes = {"title": "New title"}
    rule.on_update(existing, changes, ctx)
    assert "readTime" not in changes

    changes = {"content": " ".join(["w"] * 450)}
    rule.on_update(existing, changes, ctx)
    assert changes["readTime"] == "3 min read"


def test_published_at_is_stamped_once(ctx):
    rule = PublishedAtRule()

    draft = {"status": "draft"}
    rule.on_create(draft, ctx)
    assert draft["publishedAt"] == ""

    published = {"status": "published"}
    rule.on_create(published, ctx)
    assert published["publishedAt"] == NOW.isoformat()

    # Republishing keeps the original stamp
    existing = {"status": "draft", "publishedAt": "2024-01-01T00:00:00+00:00"}
    changes = {"status": "published"}
    rule.on_update(existing, changes, ctx)
    assert "publishedAt" not in changes


def test_event_schedule_rule(ctx):
    rule = EventScheduleRule()

    doc = {"date": "2025-06-14", "time": "10:30", "capacity": 50}
    rule.on_create(doc, ctx)
    assert doc["startAt"] == datetime(2025, 6, 14, 10, 30, tzinfo=timezone.utc)
    assert doc["seatsRemaining"] == 50

    existing = dict(doc)
    changes = {"capacity": 60, "time": "14:00"}
    rule.on_update(existing, changes, ctx)
    assert changes["startAt"] == datetime(2025, 6, 14, 14, 0, tzinfo=timezone.utc)
    # Seat recounts need the registrations and happen in the event hooks
    assert "seatsRemaining" not in changes


def test_event_schedule_tolerates_free_text_dates(ctx):
    doc = {"date": "Sometime in spring", "time": "TBC", "capacity": 0}
    EventScheduleRule().on_create(doc, ctx)
    assert doc["startAt"] is None


def test_content_lifecycle():
    assert CONTENT_LIFECYCLE.can_transition("draft", "published")
    assert CONTENT_LIFECYCLE.can_transition("published", "draft")
    assert CONTENT_LIFECYCLE.can_transition("published", "archived")
    assert CONTENT_LIFECYCLE.can_transition("archived", "archived")
    assert not CONTENT_LIFECYCLE.can_transition("archived", "published")
    assert not CONTENT_LIFECYCLE.can_transition("draft", "archived")

    with pytest.raises(InvalidTransition) as exc:
        CONTENT_LIFECYCLE.assert_transition(from_status="archived", to_status="draft")
    assert exc.value.status_code == 400

    with pytest.raises(InvalidTransition):
        CONTENT_LIFECYCLE.assert_creatable("archived")


def test_event_and_registration_lifecycles():
    assert EVENT_LIFECYCLE.can_transition("published", "completed")
    assert not EVENT_LIFECYCLE.can_transition("cancelled", "published")

    assert REGISTRATION_LIFECYCLE.can_transition("pending", "confirmed")
    assert REGISTRATION_LIFECYCLE.can_transition("cancelled", "confirmed")
    assert REGISTRATION_LIFECYCLE.can_transition("confirmed", "attended")
    assert not REGISTRATION_LIFECYCLE.can_transition("pending", "attended")
    assert not REGISTRATION_LIFECYCLE.can_transition("attended", "pending")


def test_timestamps_are_millisecond_precision():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.microsecond % 1000 == 0
    assert now - datetime.now(timezone.utc) < timedelta(seconds=5)
