import logging
from dataclasses import dataclass
from typing import Any, Final

import requests

from .base import (
    DEFAULT_TIMEOUT,
    RequestHandler,
    Tracker,
    TrackingEvent,
    TrackingInfoAdapter,
    require_list,
    require_mapping,
    require_str,
)
from .enums import Carrier
from .errors import NoDataError, TrackingError

SEARCH_URL: Final = (
    "https://speedaf.com/publicservice/v1/api/express/track/listExpressTrack"
)


class SpeedafTracker(Tracker):
    carrier = Carrier.Speedaf
    name = "Speedaf"

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ):
        self.session = session
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch(self, tracking_number: str) -> tuple[TrackingEvent, ...]:
        handler = SpeedafRequestHandler(self.session, self.timeout, self.user_agent)
        try:
            logging.info("[Speedaf] Sending post request to the track API...")
            data = handler.get_data(tracking_number)
            return SpeedafTrackingInfoAdapter.convert(tracking_number, data)
        except TrackingError as e:
            logging.info(f"[Speedaf] {e}")
            raise
        finally:
            handler.close()


class SpeedafRequestHandler(RequestHandler):
    URI = SEARCH_URL

    def build_payload(self, tracking_number: str) -> dict:
        return {"mailNoList": [tracking_number]}


@dataclass(frozen=True)
class SpeedafTrack:
    time: str
    msg_eng: str


@dataclass(frozen=True)
class SpeedafResponse:
    tracks: tuple[SpeedafTrack, ...]

    @classmethod
    def parse(cls, tracking_number: str, raw_data: Any) -> "SpeedafResponse":
        """Read `data[0].tracks[]` out of the response body"""
        body = require_mapping(raw_data, "response", tracking_number)

        data = body.get("data")
        if data is None:
            raise NoDataError(tracking_number)
        data = require_list(data, "data", tracking_number)
        if not data or data[0] is None:
            raise NoDataError(tracking_number)
        first = require_mapping(data[0], "data[0]", tracking_number)

        tracks = first.get("tracks")
        if tracks is None:
            raise NoDataError(tracking_number)
        tracks = require_list(tracks, "data[0].tracks", tracking_number)
        if not tracks:
            raise NoDataError(tracking_number)

        parsed = []
        for i, track in enumerate(tracks):
            where = f"data[0].tracks[{i}]"
            track = require_mapping(track, where, tracking_number)
            parsed.append(
                SpeedafTrack(
                    time=require_str(track, "time", where, tracking_number),
                    msg_eng=require_str(track, "msgEng", where, tracking_number),
                )
            )
        return cls(tracks=tuple(parsed))


class SpeedafTrackingInfoAdapter(TrackingInfoAdapter):
    @staticmethod
    def convert(tracking_number: str, raw_data: Any) -> tuple[TrackingEvent, ...]:
        response = SpeedafResponse.parse(tracking_number, raw_data)
        return tuple(
            TrackingEvent(timestamp=track.time, description=track.msg_eng)
            for track in response.tracks
        )
