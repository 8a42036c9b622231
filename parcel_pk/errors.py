class ParcelError(Exception):
    """Base class of every error raised by parcel_pk"""


class UnsupportedCarrierError(ParcelError, ValueError):
    def __init__(self, carrier: str):
        self.carrier = carrier
        super().__init__(f"unsupported service slug: {carrier}")


class TrackingError(ParcelError):
    """A single fetch attempt failed

    Every subclass ends the tracking session; the message is shown to the
    user as-is.
    """

    def __init__(self, message: str, tracking_number: str | None = None):
        self.tracking_number = tracking_number
        super().__init__(message)


class RequestConstructionError(TrackingError):
    pass


class TransportError(TrackingError):
    pass


class ResponseFormatError(TrackingError):
    pass


class NoDataError(TrackingError):
    def __init__(self, tracking_number: str):
        super().__init__(
            f"no data found for tracking number {tracking_number}", tracking_number
        )
