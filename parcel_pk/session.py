import time

from .base import Tracker, TrackingEvent
from .config import Settings
from .enums import Carrier
from .errors import TrackingError
from .track import resolve


class TrackingSession:
    """Latest tracking state of one parcel

    Only the controller thread reads and writes a session, so there is no
    locking. `fetch` itself only reads immutable fields and may run on a
    worker thread.
    """

    def __init__(self, tracker: Tracker, tracking_number: str, refresh_interval: int):
        if refresh_interval < 0:
            raise ValueError(f"refresh interval must not be negative: {refresh_interval}")
        self._tracker = tracker
        self._tracking_number = tracking_number
        self._refresh_interval = refresh_interval
        self._events: tuple[TrackingEvent, ...] | None = None
        self._error: TrackingError | None = None
        self.last_updated: float | None = None

    @classmethod
    def open(
        cls,
        carrier: Carrier | str,
        tracking_number: str,
        refresh_interval: int,
        settings: Settings | None = None,
    ) -> "TrackingSession":
        settings = settings or Settings()
        tracker = resolve(
            carrier,
            tracking_number,
            refresh_interval,
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
        )
        return cls(tracker, tracking_number, refresh_interval)

    def fetch(self) -> tuple[TrackingEvent, ...]:
        return self._tracker.fetch(self._tracking_number)

    def record_success(self, events, at: float | None = None) -> None:
        self._events = tuple(events)
        self._error = None
        self.last_updated = time.monotonic() if at is None else at

    def record_failure(self, error: TrackingError) -> None:
        # last-known-good events stay for display
        self._error = error

    @property
    def tracker(self) -> Tracker:
        return self._tracker

    @property
    def tracking_number(self) -> str:
        return self._tracking_number

    @property
    def carrier(self) -> Carrier:
        return self._tracker.carrier

    @property
    def refresh_interval(self) -> int:
        return self._refresh_interval

    @property
    def events(self) -> tuple[TrackingEvent, ...] | None:
        return self._events

    @property
    def error(self) -> TrackingError | None:
        return self._error
