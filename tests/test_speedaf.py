import json
import logging

import pytest
import requests

from conftest import FakeSession
from parcel_pk import (
    NoDataError,
    RequestConstructionError,
    ResponseFormatError,
    TrackingEvent,
    TransportError,
)
from parcel_pk.speedaf import (
    SEARCH_URL,
    SpeedafRequestHandler,
    SpeedafTracker,
    SpeedafTrackingInfoAdapter,
)


def test_speedaf_sends_mail_no_list():
    session = FakeSession({"data": [{"tracks": [{"time": "t", "msgEng": "m"}]}]})
    SpeedafTracker(session=session, timeout=7).fetch("SA123")

    request, kwargs = session.sent[0]
    assert request.method == "POST"
    assert request.url == SEARCH_URL
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.body) == {"mailNoList": ["SA123"]}
    assert kwargs["timeout"] == 7


def test_speedaf_normalizes_tracks_in_order():
    body = {
        "data": [
            {
                "tracks": [
                    {"time": "2024-01-03 10:00", "msgEng": "Delivered"},
                    {"time": "2024-01-02 08:30", "msgEng": "Out for delivery"},
                    {"time": "2024-01-01 00:00", "msgEng": "Picked up", "extra": 1},
                ]
            }
        ]
    }
    events = SpeedafTracker(session=FakeSession(body)).fetch("SA123")

    assert events == (
        TrackingEvent("2024-01-03 10:00", "Delivered"),
        TrackingEvent("2024-01-02 08:30", "Out for delivery"),
        TrackingEvent("2024-01-01 00:00", "Picked up"),
    )


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"data": None},
        {"data": []},
        {"data": [None]},
        {"data": [{}]},
        {"data": [{"tracks": None}]},
        {"data": [{"tracks": []}]},
    ],
)
def test_speedaf_no_data(body):
    with pytest.raises(NoDataError, match="SA404"):
        SpeedafTrackingInfoAdapter.convert("SA404", body)


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"data": {"tracks": []}},
        {"data": ["tracks"]},
        {"data": [{"tracks": "none"}]},
        {"data": [{"tracks": [{"time": "t"}]}]},
        {"data": [{"tracks": [{"time": 1700000000, "msgEng": "m"}]}]},
        {"data": [{"tracks": [None]}]},
    ],
)
def test_speedaf_unexpected_shape(body):
    with pytest.raises(ResponseFormatError):
        SpeedafTrackingInfoAdapter.convert("SA123", body)


def test_speedaf_invalid_json():
    session = FakeSession("<html>maintenance</html>")
    with pytest.raises(ResponseFormatError, match="not valid JSON"):
        SpeedafTracker(session=session).fetch("SA123")


def test_speedaf_transport_error():
    session = FakeSession(exc=requests.ConnectionError("connection refused"))
    with pytest.raises(TransportError, match="connection refused") as excinfo:
        SpeedafTracker(session=session).fetch("SA123")
    assert excinfo.value.tracking_number == "SA123"
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_speedaf_http_error_status():
    session = FakeSession("<html>Bad Gateway</html>", status_code=502)
    with pytest.raises(TransportError, match="502"):
        SpeedafTracker(session=session).fetch("SA123")


def test_speedaf_error_status_with_json_body_is_parsed():
    session = FakeSession({"data": None, "message": "not found"}, status_code=404)
    with pytest.raises(NoDataError, match="SA404"):
        SpeedafTracker(session=session).fetch("SA404")


def test_speedaf_failure_is_logged_below_warning(caplog):
    caplog.set_level(logging.INFO)
    with pytest.raises(NoDataError):
        SpeedafTracker(session=FakeSession({"data": []})).fetch("SA404")

    failures = [r for r in caplog.records if "SA404" in r.getMessage()]
    assert [r.levelno for r in failures] == [logging.INFO]
    assert failures[0].getMessage() == "[Speedaf] no data found for tracking number SA404"


def test_speedaf_unserializable_payload(monkeypatch):
    monkeypatch.setattr(
        SpeedafRequestHandler,
        "build_payload",
        lambda self, tracking_number: {"mailNoList": {tracking_number}},
    )
    session = FakeSession({})
    with pytest.raises(RequestConstructionError):
        SpeedafTracker(session=session).fetch("SA123")
    assert session.sent == []
