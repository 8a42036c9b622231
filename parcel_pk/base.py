from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Final

import requests

from .enums import Carrier
from .errors import RequestConstructionError, ResponseFormatError, TransportError

DEFAULT_TIMEOUT: Final = 15


@dataclass(frozen=True)
class TrackingEvent:
    timestamp: str
    description: str


class Tracker(ABC):
    carrier: Carrier
    name: str

    @abstractmethod
    def fetch(self, tracking_number: str) -> tuple[TrackingEvent, ...]:
        """
        Fetch the checkpoint history of the parcel

        Parameters
        ----------
        tracking_number : str
            The tracking number of the parcel

        Returns
        -------
        tuple[TrackingEvent, ...]
            The checkpoints in the order the carrier reported them

        Raises
        ------
        TrackingError
            If the request could not be sent, the response could not be
            understood, or the carrier has no data for the tracking number.
        """
        pass


class RequestHandler(ABC):
    URI: str

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ):
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    @abstractmethod
    def build_payload(self, tracking_number: str) -> dict:
        """
        Build the JSON body the carrier API expects

        Parameters
        ----------
        tracking_number : str
            The tracking number of the parcel

        Returns
        -------
        dict
            The request body, serialized as JSON when the request is prepared
        """
        pass

    def get_data(self, tracking_number: str) -> Any:
        """Post the payload to the carrier API and return the decoded JSON body"""
        headers = {"Content-Type": "application/json"}
        try:
            payload = self.build_payload(tracking_number)
            request = requests.Request("POST", self.URI, json=payload, headers=headers)
            prepared = self.session.prepare_request(request)
        except (TypeError, ValueError, requests.RequestException) as e:
            raise RequestConstructionError(
                f"failed to build request: {e}", tracking_number
            ) from e

        try:
            response = self.session.send(prepared, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}", tracking_number) from e

        # carriers answer some lookups with a JSON body and an error status
        try:
            return response.json()
        except ValueError as e:
            try:
                response.raise_for_status()
            except requests.HTTPError as http_error:
                raise TransportError(
                    f"request failed: {http_error}", tracking_number
                ) from http_error
            raise ResponseFormatError(
                f"response is not valid JSON: {e}", tracking_number
            ) from e


class TrackingInfoAdapter(ABC):
    @staticmethod
    @abstractmethod
    def convert(tracking_number: str, raw_data: Any) -> tuple[TrackingEvent, ...]:
        """
        Convert the raw data to `TrackingEvent` objects

        Parameters
        ----------
        tracking_number : str
            The tracking number the data was requested for
        raw_data : Any
            The decoded JSON body from the carrier API

        Returns
        -------
        tuple[TrackingEvent, ...]
            One event per checkpoint, in response order
        """
        pass


def require_mapping(value: Any, where: str, tracking_number: str) -> dict:
    if not isinstance(value, dict):
        raise ResponseFormatError(
            f"unexpected response format: {where} should be an object, "
            f"got {type(value).__name__}",
            tracking_number,
        )
    return value


def require_list(value: Any, where: str, tracking_number: str) -> list:
    if not isinstance(value, list):
        raise ResponseFormatError(
            f"unexpected response format: {where} should be a list, "
            f"got {type(value).__name__}",
            tracking_number,
        )
    return value


def require_str(entry: dict, key: str, where: str, tracking_number: str) -> str:
    if key not in entry:
        raise ResponseFormatError(
            f"unexpected response format: {where} is missing '{key}'", tracking_number
        )
    value = entry[key]
    if not isinstance(value, str):
        raise ResponseFormatError(
            f"unexpected response format: {where}.{key} should be a string, "
            f"got {type(value).__name__}",
            tracking_number,
        )
    return value
