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

SEARCH_URL: Final = "https://www.tcsexpress.com/apibridge"


class TcsTracker(Tracker):
    carrier = Carrier.Tcs
    name = "TCS"

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
        handler = TcsRequestHandler(self.session, self.timeout, self.user_agent)
        try:
            logging.info("[TCS] Sending post request to the api bridge...")
            data = handler.get_data(tracking_number)
            return TcsTrackingInfoAdapter.convert(tracking_number, data)
        except TrackingError as e:
            logging.info(f"[TCS] {e}")
            raise
        finally:
            handler.close()


class TcsRequestHandler(RequestHandler):
    URI = SEARCH_URL

    def build_payload(self, tracking_number: str) -> dict:
        # The bridge forwards `url`/`type`/`param` to the upstream track API
        return {
            "body": {
                "consignee": [tracking_number],
                "url": "trackapinew",
                "type": "GET",
                "payload": {},
                "param": f"consignee={tracking_number}",
            }
        }


@dataclass(frozen=True)
class TcsCheckpoint:
    datetime: str
    status: str


@dataclass(frozen=True)
class TcsResponse:
    checkpoints: tuple[TcsCheckpoint, ...]

    @classmethod
    def parse(cls, tracking_number: str, raw_data: Any) -> "TcsResponse":
        body = require_mapping(raw_data, "response", tracking_number)

        response_data = body.get("responseData")
        if response_data is None:
            raise NoDataError(tracking_number)
        response_data = require_mapping(response_data, "responseData", tracking_number)

        checkpoints = response_data.get("checkpoints")
        if checkpoints is None:
            raise NoDataError(tracking_number)
        checkpoints = require_list(
            checkpoints, "responseData.checkpoints", tracking_number
        )
        if not checkpoints:
            raise NoDataError(tracking_number)

        parsed = []
        for i, checkpoint in enumerate(checkpoints):
            where = f"responseData.checkpoints[{i}]"
            checkpoint = require_mapping(checkpoint, where, tracking_number)
            parsed.append(
                TcsCheckpoint(
                    datetime=require_str(checkpoint, "datetime", where, tracking_number),
                    status=require_str(checkpoint, "status", where, tracking_number),
                )
            )
        return cls(checkpoints=tuple(parsed))


class TcsTrackingInfoAdapter(TrackingInfoAdapter):
    @staticmethod
    def convert(tracking_number: str, raw_data: Any) -> tuple[TrackingEvent, ...]:
        response = TcsResponse.parse(tracking_number, raw_data)
        return tuple(
            TrackingEvent(timestamp=checkpoint.datetime, description=checkpoint.status)
            for checkpoint in response.checkpoints
        )
