from typing import Final

import requests

from .base import DEFAULT_TIMEOUT, Tracker, TrackingEvent
from .enums import Carrier
from .errors import UnsupportedCarrierError
from .speedaf import SpeedafTracker
from .tcs import TcsTracker

SUPPORTED_CARRIERS: Final = tuple(carrier.value for carrier in Carrier)


class TrackerFactory:
    @staticmethod
    def create(
        carrier: Carrier | str,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ) -> Tracker:
        try:
            carrier = Carrier(carrier)
        except ValueError:
            raise UnsupportedCarrierError(str(carrier)) from None

        match carrier:
            case Carrier.Speedaf:
                return SpeedafTracker(session, timeout, user_agent)
            case Carrier.Tcs:
                return TcsTracker(session, timeout, user_agent)
            case _:
                raise UnsupportedCarrierError(carrier.value)


def resolve(
    carrier: Carrier | str,
    tracking_number: str,
    refresh_interval: int,
    **kwargs,
) -> Tracker:
    """Validate the tracking inputs and build the tracker for `carrier`

    Nothing is sent over the network here, so an unsupported carrier is
    reported before any tracking activity starts.
    """
    tracker = TrackerFactory.create(carrier, **kwargs)
    if not tracking_number:
        raise ValueError("tracking number must not be empty")
    if refresh_interval < 0:
        raise ValueError(f"refresh interval must not be negative: {refresh_interval}")
    return tracker


def track(carrier: Carrier | str, tracking_number: str) -> tuple[TrackingEvent, ...]:
    tracker = resolve(carrier, tracking_number, 0)
    return tracker.fetch(tracking_number)
