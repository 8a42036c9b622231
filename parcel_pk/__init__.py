from .base import Tracker, TrackingEvent
from .config import Settings
from .controller import ControllerState, Outcome, RefreshController, TrackingSnapshot
from .enums import Carrier
from .errors import (
    NoDataError,
    ParcelError,
    RequestConstructionError,
    ResponseFormatError,
    TrackingError,
    TransportError,
    UnsupportedCarrierError,
)
from .session import TrackingSession
from .track import SUPPORTED_CARRIERS, TrackerFactory, resolve, track
