import pytest

from conftest import StubTracker
from parcel_pk import (
    Carrier,
    NoDataError,
    Settings,
    TrackingEvent,
    TrackingSession,
    UnsupportedCarrierError,
)
from parcel_pk.tcs import TcsTracker

EVENTS = [TrackingEvent("2024-01-01 09:00", "Booked")]


def test_session_fetch_delegates_to_tracker():
    tracker = StubTracker(tuple(EVENTS))
    session = TrackingSession(tracker, "SA123", 0)

    assert session.fetch() == tuple(EVENTS)
    assert tracker.calls == ["SA123"]
    assert session.events is None


def test_record_success_clears_error():
    session = TrackingSession(StubTracker(), "SA123", 10)
    session.record_failure(NoDataError("SA123"))

    session.record_success(EVENTS, at=42.0)

    assert session.events == tuple(EVENTS)
    assert session.error is None
    assert session.last_updated == 42.0


def test_record_failure_keeps_last_known_events():
    session = TrackingSession(StubTracker(), "SA123", 10)
    session.record_success(EVENTS)
    error = NoDataError("SA123")

    session.record_failure(error)

    assert session.error is error
    assert session.events == tuple(EVENTS)


def test_session_accessors():
    session = TrackingSession(StubTracker(), "SA123", 10)
    assert session.tracking_number == "SA123"
    assert session.carrier is Carrier.Speedaf
    assert session.refresh_interval == 10
    assert session.error is None


def test_session_rejects_negative_interval():
    with pytest.raises(ValueError):
        TrackingSession(StubTracker(), "SA123", -1)


def test_open_uses_settings():
    settings = Settings(request_timeout=3.5, user_agent="test-agent")
    session = TrackingSession.open("tcs", "779412326902", 30, settings)

    assert isinstance(session.tracker, TcsTracker)
    assert session.tracker.timeout == 3.5
    assert session.tracker.user_agent == "test-agent"
    assert session.carrier is Carrier.Tcs
    assert session.refresh_interval == 30


def test_open_unsupported_carrier():
    with pytest.raises(UnsupportedCarrierError):
        TrackingSession.open("leopards", "SA123", 0)
