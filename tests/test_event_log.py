from __future__ import annotations

import pytest
from sqlmodel import select

from edu_resources.models.events import ActionType, ResourceEvent
from edu_resources.services.aggregator import Aggregator
from edu_resources.services.event_log import EventLog, anonymize_ip


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("203.0.113.77", "203.0.113.0"),
        ("192.168.1.55", "192.168.1.0"),
        ("  10.0.0.1 ", "10.0.0.0"),
        ("2001:0db8:85a3:0000:0000:8a2e:0370:7334", "2001:db8:85a3::"),
        ("not-an-ip", ""),
        ("testclient", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_anonymize_ip(raw, expected):
    assert anonymize_ip(raw) == expected


def test_record_view_and_download(session):
    log = EventLog(session)
    view_id = log.record(42, ActionType.VIEW, "user-1", "198.51.100.23")
    download_id = log.record(42, "download", None, "2001:db8::1")
    assert view_id is not None
    assert download_id is not None
    assert view_id != download_id

    events = session.exec(select(ResourceEvent).order_by(ResourceEvent.id)).all()
    assert [e.action_type for e in events] == ["view", "download"]
    assert events[0].user_id == "user-1"
    assert events[0].user_ip == "198.51.100.0"
    assert events[1].user_id is None
    assert events[1].user_ip == "2001:db8::"

    summary = Aggregator(session).tracking_summary()
    assert summary.views == 1
    assert summary.downloads == 1


def test_unknown_action_is_rejected(session):
    assert EventLog(session).record(1, "like") is None
    assert EventLog(session).record(1, None) is None
    assert session.exec(select(ResourceEvent)).all() == []


def test_anonymous_actor_variants(session):
    log = EventLog(session)
    for actor in (None, 0, "0", ""):
        assert log.record(5, ActionType.VIEW, actor) is not None

    events = session.exec(select(ResourceEvent)).all()
    assert len(events) == 4
    assert all(e.user_id is None for e in events)
    # no address given
    assert all(e.user_ip == "" for e in events)
