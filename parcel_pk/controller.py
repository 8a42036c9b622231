import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final

from .base import TrackingEvent
from .enums import Carrier
from .errors import TrackingError
from .session import TrackingSession

TICK_SECONDS: Final = 1


class ControllerState(Enum):
    Starting = "starting"
    Polling = "polling"
    Idle = "idle"
    Terminated = "terminated"


class Outcome(Enum):
    Completed = "completed"
    Failed = "failed"
    Quit = "quit"


@dataclass(frozen=True)
class TickElapsed:
    at: float


@dataclass(frozen=True)
class RefreshDue:
    at: float


@dataclass(frozen=True)
class FetchCompleted:
    events: tuple[TrackingEvent, ...]


@dataclass(frozen=True)
class FetchFailed:
    error: TrackingError


@dataclass(frozen=True)
class QuitRequested:
    pass


@dataclass(frozen=True)
class TrackingSnapshot:
    tracking_number: str
    carrier: Carrier
    events: tuple[TrackingEvent, ...] | None
    error: TrackingError | None
    seconds_since_last_update: int
    state: ControllerState


def call_later(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def spawn(target: Callable[[], None]) -> threading.Thread:
    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    return thread


class RefreshController:
    """Drive a `TrackingSession` from timer, fetch and quit events

    With a refresh interval of 0 the controller fetches once and stops after
    the first success. Otherwise it ticks every second, fetches every
    `refresh_interval` seconds and runs until the user quits. A failed fetch
    ends the session in both modes.

    Timers and fetches run elsewhere and only ever `post` an event back; all
    state changes happen in `handle`, on the thread that runs the loop.
    Overlapping fetches are allowed and the last completion to be handled
    wins.
    """

    def __init__(
        self,
        session: TrackingSession,
        on_update: Callable[[TrackingSnapshot], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        call_later: Callable[[float, Callable[[], None]], object] = call_later,
        spawn: Callable[[Callable[[], None]], object] = spawn,
    ):
        self.session = session
        self.on_update = on_update
        self.state = ControllerState.Starting
        self.outcome: Outcome | None = None

        self._clock = clock
        self._call_later = call_later
        self._spawn = spawn
        self._queue: queue.Queue = queue.Queue()

        now = clock()
        self._started_at = now
        self._ticker_time = now

    @property
    def single_shot(self) -> bool:
        return self.session.refresh_interval == 0

    def post(self, event) -> None:
        self._queue.put(event)

    def request_quit(self) -> None:
        self.post(QuitRequested())

    def start(self) -> ControllerState:
        if self.state is not ControllerState.Starting:
            raise RuntimeError(f"controller already started ({self.state.value})")

        if self.single_shot:
            self._issue_fetch()
            # nothing armed, only the one fetch is awaited
            self._transition(ControllerState.Idle)
        else:
            self._arm_tick()
            self._arm_refresh()
            self._issue_fetch()
            self._transition(ControllerState.Polling)
        return self.state

    def handle(self, event) -> ControllerState:
        if self.state is ControllerState.Terminated:
            logging.debug(f"[Controller] Ignoring {type(event).__name__} after termination")
            return self.state

        match event:
            case TickElapsed(at=at):
                self._ticker_time = at
                if not self.single_shot:
                    self._arm_tick()
            case RefreshDue():
                self._arm_refresh()
                self._issue_fetch()
            case FetchCompleted(events=events):
                now = self._clock()
                self.session.record_success(events, at=now)
                self._ticker_time = now
                if self.single_shot:
                    self._terminate(Outcome.Completed)
            case FetchFailed(error=error):
                self.session.record_failure(error)
                self._terminate(Outcome.Failed)
            case QuitRequested():
                self._terminate(Outcome.Quit)
            case _:
                raise TypeError(f"Unknown controller event: {event!r}")

        return self.state

    def run(self) -> Outcome:
        """Start the controller and process events until it terminates"""
        self.start()

        while True:
            try:
                self._notify()
                if self.state is ControllerState.Terminated:
                    break
                self.handle(self._queue.get())
            except KeyboardInterrupt:
                self.handle(QuitRequested())

        return self.outcome

    def snapshot(self) -> TrackingSnapshot:
        return TrackingSnapshot(
            tracking_number=self.session.tracking_number,
            carrier=self.session.carrier,
            events=self.session.events,
            error=self.session.error,
            seconds_since_last_update=self._seconds_since_last_update(),
            state=self.state,
        )

    def _seconds_since_last_update(self) -> int:
        last_updated = self.session.last_updated
        if last_updated is None:
            last_updated = self._started_at
        return max(0, int(self._ticker_time - last_updated))

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self.snapshot())

    def _transition(self, state: ControllerState) -> None:
        logging.debug(f"[Controller] {self.state.value} -> {state.value}")
        self.state = state

    def _terminate(self, outcome: Outcome) -> None:
        self.outcome = outcome
        self._transition(ControllerState.Terminated)

    def _arm_tick(self) -> None:
        self._call_later(TICK_SECONDS, lambda: self.post(TickElapsed(self._clock())))

    def _arm_refresh(self) -> None:
        self._call_later(
            self.session.refresh_interval,
            lambda: self.post(RefreshDue(self._clock())),
        )

    def _issue_fetch(self) -> None:
        self._spawn(self._fetch)

    def _fetch(self) -> None:
        try:
            events = self.session.fetch()
        except TrackingError as e:
            self.post(FetchFailed(e))
            return
        except Exception as e:
            logging.exception("[Controller] Unexpected error while fetching")
            self.post(
                FetchFailed(TrackingError(f"unexpected error: {e}", self.session.tracking_number))
            )
            return
        self.post(FetchCompleted(tuple(events)))
